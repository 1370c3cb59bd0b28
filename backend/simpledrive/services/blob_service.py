"""Service layer for blob upload and retrieval."""

from __future__ import annotations

import hashlib
from typing import Protocol

import structlog

from simpledrive.schemas.blob import BlobPayload, BlobRecord
from simpledrive.storage.base import StorageBackend
from simpledrive.storage.errors import StorageError

logger = structlog.get_logger(__name__)


class BlobAlreadyExists(StorageError):
    """Raised when a metadata record already claims the identifier."""

    def __init__(self, blob_id: str) -> None:
        self.blob_id = blob_id
        super().__init__(f"Blob with this id already exists: {blob_id}")


class MetadataRepository(Protocol):
    """Metadata persistence consumed by BlobService."""

    def exists(self, blob_id: str) -> bool: ...

    def get(self, blob_id: str) -> BlobRecord | None: ...

    def create(
        self,
        *,
        blob_id: str,
        backend: str,
        storage_key: str,
        size_bytes: int,
        checksum_sha256: str,
    ) -> BlobRecord:
        """Insert a record, raising BlobAlreadyExists on an id collision."""
        ...


class BlobService:
    """Coordinates the metadata check, backend write and metadata record."""

    def __init__(self, storage: StorageBackend, metadata: MetadataRepository) -> None:
        self.storage = storage
        self.metadata = metadata

    def put(self, blob_id: str, data: bytes) -> BlobRecord:
        """
        Store a new blob.

        The backend write happens before the metadata insert. When two callers
        race on one new id, both writes land on the same storage key and the
        metadata primary key lets exactly one insert succeed; the other gets
        BlobAlreadyExists.
        """
        if self.metadata.exists(blob_id):
            raise BlobAlreadyExists(blob_id)

        storage_key = self.storage.store(blob_id, data)
        record = self.metadata.create(
            blob_id=blob_id,
            backend=self.storage.name,
            storage_key=storage_key,
            size_bytes=len(data),
            checksum_sha256=hashlib.sha256(data).hexdigest(),
        )
        logger.info("blob.stored", blob_id=blob_id, backend=self.storage.name, size=len(data))
        return record

    def get(self, blob_id: str) -> BlobPayload | None:
        """Return metadata and bytes, or ``None`` if either side is missing."""
        record = self.metadata.get(blob_id)
        if record is None:
            return None

        data = self.storage.fetch(record.storage_key)
        if data is None:
            logger.warning("blob.data_missing", blob_id=blob_id, storage_key=record.storage_key)
            return None
        return BlobPayload(record=record, data=data)
