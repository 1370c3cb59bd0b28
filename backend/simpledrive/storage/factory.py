"""Factory building the storage backend selected by configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import StorageBackend

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from simpledrive.config import Settings


def create_storage(settings: Settings, engine: Engine | None = None) -> StorageBackend:
    """
    Build the backend named by ``settings.storage_backend``.

    - STORAGE_BACKEND=local → LocalStorageBackend (LOCAL_DIR)
    - STORAGE_BACKEND=db    → DatabaseStorageBackend (``engine`` or DATABASE_URL)
    - STORAGE_BACKEND=s3    → S3StorageBackend (path-style, SigV4)
    - STORAGE_BACKEND=ftp   → FTPStorageBackend

    The caller owns the returned instance and passes it to whatever needs it.
    """
    backend = settings.storage_backend

    if backend == "local":
        from .local_backend import LocalStorageBackend

        return LocalStorageBackend(base_dir=settings.local_dir)

    if backend == "db":
        from simpledrive.database import build_engine

        from .db_backend import DatabaseStorageBackend

        return DatabaseStorageBackend(engine=engine if engine is not None else build_engine(settings.database_url))

    if backend == "s3":
        from .s3_backend import S3StorageBackend

        return S3StorageBackend(
            endpoint=settings.s3_endpoint,
            bucket=settings.s3_bucket,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            region=settings.s3_region,
        )

    if backend == "ftp":
        from .ftp_backend import FTPStorageBackend

        return FTPStorageBackend(
            host=settings.ftp_host,
            port=settings.ftp_port,
            user=settings.ftp_user,
            password=settings.ftp_password,
            base_dir=settings.ftp_dir,
        )

    raise ValueError(f"Unsupported storage backend: {backend}")
