"""
Sign-In-With-Ethereum (EIP-4361) message parsing.

Only parsing and field checks live here; the nonce and the signature are
checked by the auth service.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from shared.models import is_eth_address

from .exceptions import MalformedMessageError
from .models import SiweMessage


HEADER_SUFFIX = " wants you to sign in with your Ethereum account:"

_HEADER_RE = re.compile(
    r"^(?:(?P<scheme>[a-zA-Z][a-zA-Z0-9+\-.]*)://)?(?P<domain>\S+)"
    + re.escape(HEADER_SUFFIX)
    + r"$"
)
_FIELD_RE = re.compile(r"^(?P<key>[A-Za-z ]+): (?P<value>.*)$")
_NONCE_RE = re.compile(r"^[A-Za-z0-9]{8,}$")

_FIELD_NAMES = {
    "URI": "uri",
    "Version": "version",
    "Chain ID": "chain_id",
    "Nonce": "nonce",
    "Issued At": "issued_at",
    "Expiration Time": "expiration_time",
    "Not Before": "not_before",
    "Request ID": "request_id",
}


def parse_siwe_message(text: str) -> SiweMessage:
    """
    Parse a SIWE message.

    Raises:
        MalformedMessageError: If the header, address, chain id, nonce or
            issued-at timestamp is missing or malformed.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    if len(lines) < 2:
        raise MalformedMessageError("Invalid message format")

    header = _HEADER_RE.match(lines[0].strip())
    if not header:
        raise MalformedMessageError("Invalid message format - missing domain header")

    address = lines[1].strip()
    if not is_eth_address(address):
        raise MalformedMessageError("Invalid message format - bad address")

    fields: dict[str, str] = {}
    statement_lines: list[str] = []
    resources: list[str] = []
    in_resources = False

    for line in lines[2:]:
        if in_resources:
            if line.startswith("- "):
                resources.append(line[2:].strip())
            continue
        if line.strip() == "Resources:":
            in_resources = True
            continue
        match = _FIELD_RE.match(line)
        if match and match.group("key") in _FIELD_NAMES:
            fields[_FIELD_NAMES[match.group("key")]] = match.group("value").strip()
        elif line.strip() and not fields:
            statement_lines.append(line.strip())

    nonce = fields.get("nonce")
    if not nonce or not _NONCE_RE.match(nonce):
        raise MalformedMessageError()

    try:
        chain_id = int(fields["chain_id"])
    except (KeyError, ValueError):
        raise MalformedMessageError("Invalid message format - chain id not found")

    issued_at = _parse_timestamp(fields.get("issued_at"))
    if issued_at is None:
        raise MalformedMessageError("Invalid message format - issued at not found")

    return SiweMessage(
        scheme=header.group("scheme"),
        domain=header.group("domain"),
        address=address,
        statement=" ".join(statement_lines) or None,
        uri=fields.get("uri"),
        version=fields.get("version", "1"),
        chain_id=chain_id,
        nonce=nonce,
        issued_at=issued_at,
        expiration_time=_parse_timestamp(fields.get("expiration_time")),
        not_before=_parse_timestamp(fields.get("not_before")),
        request_id=fields.get("request_id"),
        resources=resources,
    )


def check_message_window(message: SiweMessage, now: Optional[datetime] = None) -> bool:
    """Return True when now falls inside the message's validity window."""
    now = now or datetime.now(timezone.utc)
    if message.expiration_time is not None and now >= message.expiration_time:
        return False
    if message.not_before is not None and now < message.not_before:
        return False
    return True


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise MalformedMessageError(f"Invalid message format - bad timestamp: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
