"""Tests for the SIWE handshake service."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
from postgrest.exceptions import APIError

from modules.auth.exceptions import (
    InvalidAddressError,
    InvalidNonceError,
    InvalidSignatureError,
    MalformedMessageError,
    MissingFieldsError,
    SignatureServiceError,
    UnsupportedChainError,
)
from modules.auth.identity import IdentityRepository
from modules.auth.models import VerifyRequest
from modules.auth.nonces import NonceRepository
from modules.auth.service import AuthService
from modules.auth.signatures import SignatureVerifier

from tests.conftest import make_settings
from tests.wallets import TestWallet, build_siwe_message


def _no_rpc(request):
    raise AssertionError("EOA verification must not call the RPC")


@pytest.fixture
def settings():
    return make_settings(siwe_domain="app.subvault.xyz")


@pytest.fixture
def nonces(fake_db):
    return NonceRepository(fake_db, ttl_seconds=300)


@pytest.fixture
def service(fake_db, nonces, settings) -> AuthService:
    return AuthService(
        nonces=nonces,
        verifier=SignatureVerifier(settings, transport=httpx.MockTransport(_no_rpc)),
        identity=IdentityRepository(
            fake_db,
            password_secret=settings.password_secret,
            email_domain=settings.siwe_email_domain,
            sign_in_client_factory=lambda: fake_db,
        ),
        settings=settings,
    )


@pytest.fixture
def wallet() -> TestWallet:
    return TestWallet(seed=42)


def signed_request(wallet: TestWallet, nonce: str, **message_args) -> VerifyRequest:
    message = build_siwe_message(wallet.address, nonce, **message_args)
    return VerifyRequest(address=wallet.address, message=message, signature=wallet.sign(message))


class TestIssueNonce:
    @pytest.mark.asyncio
    async def test_issue_nonce_stores_nonce(self, service, fake_db):
        response = await service.issue_nonce()
        assert [r["nonce"] for r in fake_db.tables["auth_nonces"]] == [response.nonce]

    @pytest.mark.asyncio
    async def test_issue_purges_expired_nonces(self, service, nonces, fake_db):
        nonces.issue(now=datetime.now(timezone.utc) - timedelta(hours=1))
        response = await service.issue_nonce()
        assert [r["nonce"] for r in fake_db.tables["auth_nonces"]] == [response.nonce]

    @pytest.mark.asyncio
    async def test_purge_failure_does_not_block_issuance(self, settings):
        nonces = MagicMock()
        nonces.purge_expired.side_effect = APIError({"message": "timeout", "code": "57014"})
        nonces.issue.return_value = "abcdef0123456789"
        service = AuthService(
            nonces=nonces, verifier=MagicMock(), identity=MagicMock(), settings=settings
        )

        response = await service.issue_nonce()

        assert response.nonce == "abcdef0123456789"


class TestVerify:
    @pytest.mark.asyncio
    async def test_successful_sign_in(self, service, wallet, fake_db):
        nonce = (await service.issue_nonce()).nonce

        response = await service.verify(signed_request(wallet, nonce))

        assert response.ok is True
        assert response.address == wallet.address
        assert response.session.access_token
        assert response.session.user_id == fake_db.tables["user_profiles"][0]["user_id"]
        assert fake_db.tables["auth_nonces"] == []

    @pytest.mark.asyncio
    async def test_nonce_cannot_be_replayed(self, service, wallet):
        nonce = (await service.issue_nonce()).nonce
        request = signed_request(wallet, nonce)

        await service.verify(request)
        with pytest.raises(InvalidNonceError):
            await service.verify(request)

    @pytest.mark.asyncio
    async def test_expired_nonce_is_rejected(self, service, nonces, wallet):
        nonce = nonces.issue(now=datetime.now(timezone.utc) - timedelta(minutes=10))

        with pytest.raises(InvalidNonceError) as exc_info:
            await service.verify(signed_request(wallet, nonce))
        assert exc_info.value.message == "Invalid or expired nonce"

    @pytest.mark.asyncio
    async def test_unknown_nonce_is_rejected(self, service, wallet):
        with pytest.raises(InvalidNonceError):
            await service.verify(signed_request(wallet, "deadbeefdeadbeef"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["address", "message", "signature"])
    async def test_missing_fields(self, service, wallet, fake_db, missing):
        request = signed_request(wallet, "deadbeefdeadbeef").model_copy(update={missing: None})
        with pytest.raises(MissingFieldsError):
            await service.verify(request)
        assert fake_db.calls == []

    @pytest.mark.asyncio
    async def test_invalid_claimed_address(self, service, wallet):
        request = signed_request(wallet, "deadbeefdeadbeef").model_copy(update={"address": "0x12"})
        with pytest.raises(InvalidAddressError):
            await service.verify(request)

    @pytest.mark.asyncio
    async def test_malformed_message(self, service, wallet):
        request = VerifyRequest(address=wallet.address, message="hello", signature="0x00")
        with pytest.raises(MalformedMessageError):
            await service.verify(request)

    @pytest.mark.asyncio
    async def test_unsupported_chain_does_not_burn_nonce(self, service, wallet, fake_db):
        nonce = (await service.issue_nonce()).nonce
        with pytest.raises(UnsupportedChainError):
            await service.verify(signed_request(wallet, nonce, chain_id=1))
        assert len(fake_db.tables["auth_nonces"]) == 1

    @pytest.mark.asyncio
    async def test_signature_from_other_wallet(self, service, wallet):
        nonce = (await service.issue_nonce()).nonce
        message = build_siwe_message(wallet.address, nonce)
        request = VerifyRequest(
            address=wallet.address, message=message, signature=TestWallet(seed=1).sign(message)
        )
        service._verifier = SignatureVerifier(
            make_settings(),
            transport=httpx.MockTransport(
                lambda r: httpx.Response(
                    200, json={"jsonrpc": "2.0", "id": 1, "error": {"message": "reverted"}}
                )
            ),
        )

        with pytest.raises(InvalidSignatureError):
            await service.verify(request)

    @pytest.mark.asyncio
    async def test_rejected_signature_still_burns_nonce(self, service, wallet, fake_db):
        nonce = (await service.issue_nonce()).nonce
        service._verifier = MagicMock(verify=AsyncMock(return_value=False))

        with pytest.raises(InvalidSignatureError):
            await service.verify(signed_request(wallet, nonce))
        assert fake_db.tables["auth_nonces"] == []

    @pytest.mark.asyncio
    async def test_address_mismatch_with_message(self, service, wallet):
        nonce = (await service.issue_nonce()).nonce
        other = TestWallet(seed=1)
        message = build_siwe_message(other.address, nonce)
        request = VerifyRequest(address=wallet.address, message=message, signature=wallet.sign(message))

        with pytest.raises(InvalidSignatureError):
            await service.verify(request)

    @pytest.mark.asyncio
    async def test_wrong_domain(self, service, wallet):
        nonce = (await service.issue_nonce()).nonce
        with pytest.raises(InvalidSignatureError):
            await service.verify(signed_request(wallet, nonce, domain="evil.example"))

    @pytest.mark.asyncio
    async def test_expired_message(self, service, wallet):
        nonce = (await service.issue_nonce()).nonce
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        with pytest.raises(InvalidSignatureError):
            await service.verify(signed_request(wallet, nonce, expiration_time=past))

    @pytest.mark.asyncio
    async def test_rpc_outage_surfaces_as_service_error(self, service, wallet):
        nonce = (await service.issue_nonce()).nonce
        service._verifier = MagicMock(
            verify=AsyncMock(side_effect=SignatureServiceError(8453, "timeout"))
        )
        with pytest.raises(SignatureServiceError):
            await service.verify(signed_request(wallet, nonce))

    @pytest.mark.asyncio
    async def test_signature_is_never_logged(self, service, wallet, caplog):
        nonce = (await service.issue_nonce()).nonce
        request = signed_request(wallet, nonce)
        service._verifier = MagicMock(verify=AsyncMock(return_value=False))

        with caplog.at_level("DEBUG"):
            with pytest.raises(InvalidSignatureError):
                await service.verify(request)

        assert request.signature not in caplog.text
        assert request.signature[2:] not in caplog.text
        assert wallet.address in caplog.text
