"""Storage backends for SimpleDrive: local filesystem, database table, S3-compatible and FTP."""

from .base import StorageBackend
from .errors import (
    BackendError,
    BackendReadFailed,
    BackendUnavailable,
    BackendWriteFailed,
    InvalidInput,
    StorageError,
)
from .factory import create_storage
from .keys import derive_key

__all__ = [
    "BackendError",
    "BackendReadFailed",
    "BackendUnavailable",
    "BackendWriteFailed",
    "InvalidInput",
    "StorageBackend",
    "StorageError",
    "create_storage",
    "derive_key",
]
