"""Storage key derivation from logical identifiers."""

from __future__ import annotations

import hashlib
import re

from .errors import InvalidInput

MAX_IDENTIFIER_LENGTH = 512

_STORAGE_KEY_RE = re.compile(r"^[0-9a-f]{64}$")


def derive_key(identifier: str) -> str:
    """Return the lowercase hex SHA-256 digest of the UTF-8 identifier."""
    return hashlib.sha256(identifier.encode("utf-8")).hexdigest()


def validate_identifier(identifier: str) -> None:
    if not isinstance(identifier, str) or not identifier:
        raise InvalidInput("identifier must be a non-empty string")
    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        raise InvalidInput(f"identifier must be between 1 and {MAX_IDENTIFIER_LENGTH} characters")


def is_storage_key(value: object) -> bool:
    """Check for exactly 64 lowercase hex characters."""
    return isinstance(value, str) and _STORAGE_KEY_RE.match(value) is not None


def ensure_storage_key(value: str) -> str:
    if not is_storage_key(value):
        raise InvalidInput(f"malformed storage key: {value!r}")
    return value
