"""Storage key derivation and validation tests."""

from __future__ import annotations

import pytest

from simpledrive.storage.errors import InvalidInput
from simpledrive.storage.keys import (
    MAX_IDENTIFIER_LENGTH,
    derive_key,
    ensure_storage_key,
    is_storage_key,
    validate_identifier,
)


def test_derive_key_is_lowercase_sha256_hex() -> None:
    """Keys should be the SHA-256 hex digest of the UTF-8 identifier."""
    assert derive_key("hello") == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    assert derive_key("report.pdf") == "6466e450a16b77b865c5829d6b6c56d9f892956475642dbeb9ccc4340fe01b15"


def test_derive_key_encodes_identifier_as_utf8() -> None:
    """Non-ASCII identifiers should hash their UTF-8 bytes."""
    assert derive_key("héllo") == "3c48591d8d098a4538f5e013dfcf406e948eac4d3277b10bf614e295d6068179"


def test_derive_key_is_stable_and_distinct() -> None:
    """The same identifier always maps to one key; different ones do not collide."""
    identifiers = [f"invoice-{index}" for index in range(200)]
    first = [derive_key(identifier) for identifier in identifiers]
    second = [derive_key(identifier) for identifier in identifiers]

    assert first == second
    assert len(set(first)) == len(identifiers)
    assert all(is_storage_key(key) for key in first)


@pytest.mark.parametrize("identifier", ["", None, 42])
def test_validate_identifier_rejects_empty_or_non_string(identifier) -> None:
    with pytest.raises(InvalidInput, match="non-empty string"):
        validate_identifier(identifier)


def test_validate_identifier_length_bounds() -> None:
    """Identifiers may use up to 512 characters."""
    validate_identifier("a")
    validate_identifier("x" * MAX_IDENTIFIER_LENGTH)

    with pytest.raises(InvalidInput, match="between 1 and 512"):
        validate_identifier("x" * (MAX_IDENTIFIER_LENGTH + 1))


@pytest.mark.parametrize(
    "value",
    [
        "0" * 63,
        "0" * 65,
        "A" * 64,
        "../" + "0" * 61,
        "g" * 64,
        None,
    ],
)
def test_malformed_storage_keys_are_rejected(value) -> None:
    assert not is_storage_key(value)
    with pytest.raises(InvalidInput):
        ensure_storage_key(value)
