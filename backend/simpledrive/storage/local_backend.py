"""Local filesystem storage backend."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

import structlog

from .base import StorageBackend
from .errors import BackendReadFailed, BackendUnavailable, BackendWriteFailed
from .keys import ensure_storage_key

logger = structlog.get_logger(__name__)


def _default_file_mode() -> int:
    """Mode a plain ``open(path, "w")`` would give under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# mkstemp creates 0600 files; stored blobs follow the process umask instead.
FILE_MODE = _default_file_mode()


class LocalStorageBackend(StorageBackend):
    """
    Filesystem backend: one file per storage key directly under base_dir.

    Writes go to a uniquely named temp file in the same directory and are
    renamed over the final path, so readers see either the old or the new
    payload in full.
    """

    name = "local"

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)
        logger.info("local_storage.initialized", base_dir=str(self.base_dir))

    def _resolve(self, storage_key: str) -> Path:
        return self.base_dir / ensure_storage_key(storage_key)

    def store(self, identifier: str, data: bytes) -> str:
        storage_key = self.key_for(identifier)
        dest = self._resolve(storage_key)

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackendUnavailable(self.name, f"cannot create {dest.parent}", detail=str(exc)) from exc

        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{storage_key}.", suffix=".tmp", dir=dest.parent)
        except OSError as exc:
            raise BackendWriteFailed(self.name, f"cannot create temp file in {dest.parent}", detail=str(exc)) from exc

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, dest)
        except OSError as exc:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise BackendWriteFailed(self.name, f"write failed for {storage_key}", detail=str(exc)) from exc

        logger.debug("local_storage.stored", key=storage_key, size=len(data))
        return storage_key

    def fetch(self, storage_key: str) -> bytes | None:
        path = self._resolve(storage_key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("local_storage.not_found", key=storage_key)
            return None
        except OSError as exc:
            raise BackendReadFailed(self.name, f"read failed for {storage_key}", detail=str(exc)) from exc
        logger.debug("local_storage.fetched", key=storage_key, size=len(data))
        return data

    def remove(self, storage_key: str) -> None:
        path = self._resolve(storage_key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise BackendWriteFailed(self.name, f"delete failed for {storage_key}", detail=str(exc)) from exc
        logger.debug("local_storage.deleted", key=storage_key)
