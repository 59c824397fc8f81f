"""
URL-safe vault handles.

A handle is derived from the vault name (or an explicit handle), and is
unique per owner, case-insensitively. Collisions are resolved by appending
``-2``, ``-3`` and so on.
"""

import re
import secrets
from typing import Iterable, Optional

HANDLE_MAX_LENGTH = 50
HANDLE_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
_HYPHENS_RE = re.compile(r"-{2,}")


def generate_handle(value: str, max_length: int = HANDLE_MAX_LENGTH) -> str:
    """
    Normalize a name into a handle.

    Examples:
        >>> generate_handle("Marketing Team!!")
        'marketing-team'
        >>> generate_handle("  ---  ")
        ''
    """
    handle = _NON_SLUG_RE.sub("-", (value or "").lower())
    handle = _HYPHENS_RE.sub("-", handle).strip("-")
    return handle[:max_length].rstrip("-")


def fallback_handle() -> str:
    """Handle used when a name has no usable characters."""
    return f"vault-{secrets.token_hex(3)}"


def base_handle(
    name: str,
    handle: Optional[str] = None,
    max_length: int = HANDLE_MAX_LENGTH,
) -> str:
    """Normalized handle for a vault before collision suffixes."""
    source = handle if handle is not None and handle.strip() else name
    return generate_handle(source, max_length) or fallback_handle()


def with_suffix(base: str, n: int, max_length: int = HANDLE_MAX_LENGTH) -> str:
    """
    The n-th candidate for a base handle.

    ``base`` for n == 1, otherwise ``base-n``; the base is trimmed so the
    result never exceeds max_length.
    """
    if n <= 1:
        return base[:max_length]
    suffix = f"-{n}"
    trimmed = base[: max_length - len(suffix)].rstrip("-")
    return f"{trimmed}{suffix}"


def first_free_handle(
    base: str,
    taken: Iterable[str],
    max_length: int = HANDLE_MAX_LENGTH,
) -> str:
    """First candidate for base that is not in taken (case-insensitive)."""
    used = {h.lower() for h in taken}
    n = 1
    while True:
        candidate = with_suffix(base, n, max_length)
        if candidate not in used:
            return candidate
        n += 1
