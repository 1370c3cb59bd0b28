"""Typed errors raised at the storage backend boundary.

Low-level faults (errno values, HTTP statuses, FTP reply codes, driver
exceptions) are classified into these kinds and chained as ``__cause__``.
Absence of a key is not an error: ``fetch`` returns ``None``.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for all storage errors."""


class InvalidInput(StorageError):
    """Raised for malformed identifiers or storage keys."""


class BackendError(StorageError):
    """A fault reported by (or while reaching) a backend medium."""

    def __init__(
        self,
        backend: str,
        message: str,
        *,
        status: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.backend = backend
        self.status = status
        self.detail = detail
        text = f"[{backend}] {message}"
        if status is not None:
            text = f"{text} (status={status})"
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)


class BackendUnavailable(BackendError):
    """The medium could not be reached or rejected the credentials."""


class BackendReadFailed(BackendError):
    """A read reached the medium but failed partway."""


class BackendWriteFailed(BackendError):
    """A write or delete reached the medium but failed partway."""
