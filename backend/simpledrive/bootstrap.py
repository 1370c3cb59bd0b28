"""Process startup: wire settings, logging, database and storage together."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy import Engine

from simpledrive.config import Settings, get_settings
from simpledrive.database import Base, build_engine, build_session_factory
from simpledrive.logging_config import configure_logging
from simpledrive.services.blob_service import BlobService
from simpledrive.services.metadata_repository import SqlMetadataRepository
from simpledrive.storage import StorageBackend, create_storage

logger = structlog.get_logger(__name__)


@dataclass
class Runtime:
    """Handles built once at startup and passed to request paths."""

    settings: Settings
    engine: Engine
    storage: StorageBackend
    blobs: BlobService


def build_runtime(settings: Settings | None = None, *, create_tables: bool = True) -> Runtime:
    """Build the process-wide runtime; the backend is fixed from here on."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    import simpledrive.models  # noqa: F401

    engine = build_engine(settings.database_url)
    if create_tables:
        Base.metadata.create_all(bind=engine)

    storage = create_storage(settings, engine=engine)
    blobs = BlobService(storage, SqlMetadataRepository(build_session_factory(engine)))
    logger.info("app.startup", env=settings.env, storage_backend=storage.name)
    return Runtime(settings=settings, engine=engine, storage=storage, blobs=blobs)
