"""Relational table storage backend (SQLAlchemy)."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import Connection, Engine, delete, insert, select, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from simpledrive.models.blob_data import BlobData

from .base import StorageBackend
from .errors import BackendError, BackendReadFailed, BackendUnavailable, BackendWriteFailed
from .keys import ensure_storage_key

logger = structlog.get_logger(__name__)


class DatabaseStorageBackend(StorageBackend):
    """
    Backend storing each payload as one row of ``blob_data_store``.

    The engine is owned by the caller. Every call is a single-row statement
    in its own transaction; concurrent upserts of one key resolve
    last-writer-wins through the engine's row-level conflict handling.
    """

    name = "db"

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        logger.info("db_storage.initialized", dialect=engine.dialect.name, table=BlobData.__tablename__)

    def _connect(self) -> Connection:
        try:
            return self.engine.connect()
        except SQLAlchemyError as exc:
            raise BackendUnavailable(self.name, "database unreachable", detail=str(exc)) from exc

    def _classify(self, exc: SQLAlchemyError, failure: type[BackendError], message: str) -> BackendError:
        """Map a statement error; a connection lost mid-statement means the database is gone."""
        if isinstance(exc, OperationalError) and exc.connection_invalidated:
            logger.warning("db_storage.connection_lost", error=str(exc.orig))
            return BackendUnavailable(self.name, "database connection lost", detail=str(exc))
        return failure(self.name, message, detail=str(exc))

    def _upsert(self, connection: Connection, storage_key: str, data: bytes) -> None:
        now = datetime.now(timezone.utc)
        dialect = self.engine.dialect.name
        if dialect in {"postgresql", "sqlite"}:
            if dialect == "postgresql":
                from sqlalchemy.dialects.postgresql import insert as dialect_insert
            else:
                from sqlalchemy.dialects.sqlite import insert as dialect_insert

            stmt = dialect_insert(BlobData).values(key=storage_key, data=data, created_at=now)
            stmt = stmt.on_conflict_do_update(
                index_elements=[BlobData.key],
                set_={"data": stmt.excluded["data"], "created_at": stmt.excluded["created_at"]},
            )
            connection.execute(stmt)
            return

        # Portable fallback for engines without ON CONFLICT support.
        result = connection.execute(
            update(BlobData).where(BlobData.key == storage_key).values(data=data, created_at=now)
        )
        if result.rowcount == 0:
            connection.execute(insert(BlobData).values(key=storage_key, data=data, created_at=now))

    def store(self, identifier: str, data: bytes) -> str:
        storage_key = self.key_for(identifier)
        with self._connect() as connection:
            try:
                self._upsert(connection, storage_key, bytes(data))
                connection.commit()
            except SQLAlchemyError as exc:
                raise self._classify(exc, BackendWriteFailed, f"upsert failed for {storage_key}") from exc
        logger.debug("db_storage.stored", key=storage_key, size=len(data))
        return storage_key

    def fetch(self, storage_key: str) -> bytes | None:
        ensure_storage_key(storage_key)
        with self._connect() as connection:
            try:
                data = connection.execute(
                    select(BlobData.data).where(BlobData.key == storage_key)
                ).scalar_one_or_none()
            except SQLAlchemyError as exc:
                raise self._classify(exc, BackendReadFailed, f"lookup failed for {storage_key}") from exc
        if data is None:
            logger.debug("db_storage.not_found", key=storage_key)
            return None
        return bytes(data)

    def remove(self, storage_key: str) -> None:
        ensure_storage_key(storage_key)
        with self._connect() as connection:
            try:
                connection.execute(delete(BlobData).where(BlobData.key == storage_key))
                connection.commit()
            except SQLAlchemyError as exc:
                raise self._classify(exc, BackendWriteFailed, f"delete failed for {storage_key}") from exc
        logger.debug("db_storage.deleted", key=storage_key)
