"""
Ethereum signature verification for Sign-In-With-Ethereum.

Supports:
- EOA signatures (EIP-191 personal_sign), recovered locally with secp256k1
- Smart-contract accounts (ERC-1271 isValidSignature), checked over JSON-RPC
- ERC-6492 wrapped signatures from smart wallets, deployed or not

An undeployed ERC-6492 account is checked with one eth_call to Multicall3:
the first call runs the factory calldata, which deploys the account inside
the simulated transaction, and the second calls isValidSignature on it.

The RPC endpoint is always picked from the chain id in the signed message,
so a Base Sepolia message is never checked against mainnet state.
"""

import logging
from typing import Optional

import httpx
from coincurve import PublicKey
from Crypto.Hash import keccak

from shared.config import Settings, get_settings

from .exceptions import SignatureServiceError, UnsupportedChainError

logger = logging.getLogger(__name__)

# bytes4(keccak256("isValidSignature(bytes32,bytes)"))
ERC1271_MAGIC_VALUE = "1626ba7e"

# Trailing 32 bytes that mark an ERC-6492 wrapped signature
ERC6492_SUFFIX = bytes.fromhex("64926492" * 8)

SIGNATURE_LENGTH = 65

# Multicall3 has the same address on Base and Base Sepolia
MULTICALL3_ADDRESS = "0xca11bde05977b3631167028862be2a173976ca11"

# bytes4(keccak256("aggregate3((address,bool,bytes)[])"))
AGGREGATE3_SELECTOR = "82ad56cb"


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (the pre-standard SHA-3 used by Ethereum)."""
    return keccak.new(digest_bits=256, data=data).digest()


def hash_personal_message(message: str) -> bytes:
    """Hash a message the way personal_sign does (EIP-191 version 0x45)."""
    body = message.encode("utf-8")
    prefix = f"\x19Ethereum Signed Message:\n{len(body)}".encode("utf-8")
    return keccak256(prefix + body)


def public_key_to_address(public_key: PublicKey) -> str:
    """Derive the lowercase 0x address for a secp256k1 public key."""
    uncompressed = public_key.format(compressed=False)
    return "0x" + keccak256(uncompressed[1:])[-20:].hex()


def recover_address(message_hash: bytes, signature: bytes) -> Optional[str]:
    """
    Recover the signer address from a 65-byte r||s||v signature.

    Returns None when the signature is not recoverable.
    """
    if len(signature) != SIGNATURE_LENGTH:
        return None

    v = signature[64]
    if v >= 27:
        v -= 27
    if v not in (0, 1):
        return None

    try:
        public_key = PublicKey.from_signature_and_message(
            signature[:64] + bytes([v]),
            message_hash,
            hasher=None,
        )
    except ValueError:
        return None
    return public_key_to_address(public_key)


def decode_hex(value: str) -> Optional[bytes]:
    """Decode a 0x-prefixed hex string, or return None if it is not hex."""
    if value.startswith(("0x", "0X")):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError:
        return None


def _abi_word(value: int) -> bytes:
    return value.to_bytes(32, "big")


def _abi_bytes(value: bytes) -> bytes:
    """Length-prefixed, zero-padded dynamic bytes."""
    return _abi_word(len(value)) + value + b"\x00" * ((-len(value)) % 32)


def encode_is_valid_signature(message_hash: bytes, signature: bytes) -> str:
    """ABI-encode a call to isValidSignature(bytes32,bytes)."""
    payload = message_hash + _abi_word(64) + _abi_bytes(signature)
    return "0x" + ERC1271_MAGIC_VALUE + payload.hex()


def encode_aggregate3(calls: list[tuple[str, bytes]]) -> str:
    """
    ABI-encode a Multicall3 aggregate3 call.

    Each (target, calldata) pair becomes a Call3 with allowFailure set, so a
    reverting call shows up as success=False instead of reverting the batch.
    """
    elements = [
        bytes(12) + bytes.fromhex(target[2:]) + _abi_word(1) + _abi_word(96) + _abi_bytes(data)
        for target, data in calls
    ]
    offsets = b""
    position = 32 * len(elements)
    for element in elements:
        offsets += _abi_word(position)
        position += len(element)

    payload = _abi_word(32) + _abi_word(len(elements)) + offsets + b"".join(elements)
    return "0x" + AGGREGATE3_SELECTOR + payload.hex()


def decode_aggregate3(result: str) -> Optional[list[tuple[bool, bytes]]]:
    """
    Decode aggregate3's (bool success, bytes returnData)[] result.

    Returns None when the data is not a well-formed result array.
    """
    data = decode_hex(result)
    if data is None:
        return None

    def word(offset: int) -> int:
        if offset + 32 > len(data):
            raise ValueError("ABI word out of range")
        return int.from_bytes(data[offset : offset + 32], "big")

    try:
        array_start = word(0)
        count = word(array_start)
        heads = array_start + 32
        decoded = []
        for i in range(count):
            element = heads + word(heads + 32 * i)
            success = word(element) != 0
            length_at = element + word(element + 32)
            length = word(length_at)
            if length_at + 32 + length > len(data):
                raise ValueError("ABI bytes out of range")
            decoded.append((success, data[length_at + 32 : length_at + 32 + length]))
    except ValueError:
        return None
    return decoded


def unwrap_erc6492(signature: bytes) -> Optional[tuple[str, bytes, bytes]]:
    """
    Split an ERC-6492 signature into (factory, factory_calldata, inner_signature).

    Returns None when the signature does not carry the ERC-6492 suffix or the
    ABI payload is malformed.
    """
    if not signature.endswith(ERC6492_SUFFIX):
        return None
    data = signature[: -len(ERC6492_SUFFIX)]
    if len(data) < 96:
        return None

    def read_bytes(offset: int) -> bytes:
        length = int.from_bytes(data[offset : offset + 32], "big")
        start = offset + 32
        if start + length > len(data):
            raise ValueError("ABI bytes out of range")
        return data[start : start + length]

    try:
        factory = "0x" + data[12:32].hex()
        calldata = read_bytes(int.from_bytes(data[32:64], "big"))
        inner = read_bytes(int.from_bytes(data[64:96], "big"))
    except ValueError:
        return None
    return factory, calldata, inner


class SignatureVerifier:
    """
    Verifies that an address signed a message on a given chain.

    Args:
        settings: Settings providing the per-chain RPC URLs
        transport: Optional httpx transport (tests pass a MockTransport)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or get_settings()
        self._transport = transport

    async def verify(self, address: str, message: str, signature: str, chain_id: int) -> bool:
        """
        Check a signature.

        Returns False for any signature that does not verify. Raises
        SignatureServiceError only when the chain RPC cannot be reached.
        """
        rpc_url = self._settings.rpc_url_for_chain(chain_id)
        if rpc_url is None:
            raise UnsupportedChainError(chain_id)

        raw = decode_hex(signature)
        if not raw:
            return False

        expected = address.lower()
        message_hash = hash_personal_message(message)

        wrapped = unwrap_erc6492(raw)
        if wrapped is not None:
            factory, calldata, inner = wrapped
            if await self._is_deployed(rpc_url, expected, chain_id):
                return await self._is_valid_contract_signature(
                    rpc_url, expected, message_hash, inner, chain_id
                )
            logger.info(f"Checking counterfactual account {expected} on chain {chain_id}")
            return await self._is_valid_counterfactual_signature(
                rpc_url, expected, factory, calldata, message_hash, inner, chain_id
            )

        if recover_address(message_hash, raw) == expected:
            return True

        # An address without code can only sign as an EOA
        if not await self._is_deployed(rpc_url, expected, chain_id):
            return False
        return await self._is_valid_contract_signature(
            rpc_url, expected, message_hash, raw, chain_id
        )

    # -------------------------------------------------------------------------
    # JSON-RPC helpers
    # -------------------------------------------------------------------------

    async def _is_deployed(self, rpc_url: str, address: str, chain_id: int) -> bool:
        code = await self._rpc(rpc_url, "eth_getCode", [address, "latest"], chain_id)
        return isinstance(code, str) and code not in ("", "0x", "0x0")

    async def _is_valid_contract_signature(
        self,
        rpc_url: str,
        address: str,
        message_hash: bytes,
        signature: bytes,
        chain_id: int,
    ) -> bool:
        call = {"to": address, "data": encode_is_valid_signature(message_hash, signature)}
        result = await self._rpc(rpc_url, "eth_call", [call, "latest"], chain_id)
        if not isinstance(result, str):
            return False
        return result.lower().removeprefix("0x")[:8] == ERC1271_MAGIC_VALUE

    async def _is_valid_counterfactual_signature(
        self,
        rpc_url: str,
        address: str,
        factory: str,
        factory_calldata: bytes,
        message_hash: bytes,
        signature: bytes,
        chain_id: int,
    ) -> bool:
        """Deploy through the factory and call isValidSignature in one simulated call."""
        check = decode_hex(encode_is_valid_signature(message_hash, signature))
        call = {
            "to": MULTICALL3_ADDRESS,
            "data": encode_aggregate3([(factory, factory_calldata), (address, check)]),
        }
        result = await self._rpc(rpc_url, "eth_call", [call, "latest"], chain_id)
        if not isinstance(result, str):
            return False

        decoded = decode_aggregate3(result)
        if not decoded or len(decoded) != 2:
            return False
        success, return_data = decoded[1]
        return success and return_data[:4].hex() == ERC1271_MAGIC_VALUE

    async def _rpc(self, rpc_url: str, method: str, params: list, chain_id: int):
        """
        Make a JSON-RPC call and return its result.

        A JSON-RPC error (such as a revert from an EOA or a contract that does
        not implement ERC-1271) yields None. Transport failures raise.
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._settings.rpc_timeout_seconds,
            ) as client:
                response = await client.post(rpc_url, json=payload)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"RPC {method} failed on chain {chain_id}: {e}")
            raise SignatureServiceError(chain_id, str(e))

        if body.get("error"):
            logger.debug(f"RPC {method} returned error on chain {chain_id}: {body['error']}")
            return None
        return body.get("result")
