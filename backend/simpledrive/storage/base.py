"""Abstract interface shared by every storage backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .keys import derive_key, validate_identifier


class StorageBackend(ABC):
    """Common interface for local, table, S3-compatible and FTP storage.

    One instance is built at startup and kept for the process lifetime.
    Calls are independent of each other: no locks, caches or open handles
    survive between them.
    """

    #: Short variant name, also recorded in blob metadata.
    name: str = ""

    @staticmethod
    def key_for(identifier: str) -> str:
        """Validate ``identifier`` and derive its storage key."""
        validate_identifier(identifier)
        return derive_key(identifier)

    @abstractmethod
    def store(self, identifier: str, data: bytes) -> str:
        """Persist ``data`` under the key derived from ``identifier`` (upsert). Return the key."""

    @abstractmethod
    def fetch(self, storage_key: str) -> bytes | None:
        """Return the stored payload, or ``None`` when nothing is stored at ``storage_key``."""

    @abstractmethod
    def remove(self, storage_key: str) -> None:
        """Delete the payload. Silent when the key is already absent."""
