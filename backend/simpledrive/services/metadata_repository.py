"""SQLAlchemy-backed blob metadata repository."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from simpledrive.models.blob import Blob
from simpledrive.schemas.blob import BlobRecord
from simpledrive.services.blob_service import BlobAlreadyExists


class SqlMetadataRepository:
    """Reads and inserts rows of the ``blobs`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def exists(self, blob_id: str) -> bool:
        with self._session_factory() as db:
            return db.get(Blob, blob_id) is not None

    def get(self, blob_id: str) -> BlobRecord | None:
        with self._session_factory() as db:
            blob = db.get(Blob, blob_id)
            if blob is None:
                return None
            return BlobRecord.model_validate(blob)

    def create(
        self,
        *,
        blob_id: str,
        backend: str,
        storage_key: str,
        size_bytes: int,
        checksum_sha256: str,
    ) -> BlobRecord:
        with self._session_factory() as db:
            blob = Blob(
                id=blob_id,
                backend=backend,
                storage_key=storage_key,
                size_bytes=size_bytes,
                checksum_sha256=checksum_sha256,
            )
            db.add(blob)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise BlobAlreadyExists(blob_id) from exc
            db.refresh(blob)
            return BlobRecord.model_validate(blob)
