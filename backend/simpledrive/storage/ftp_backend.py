"""FTP storage backend: one connection per call, one file per storage key."""

from __future__ import annotations

import contextlib
import ftplib
import io
import posixpath
from collections.abc import Iterator

import structlog

from .base import StorageBackend
from .errors import BackendReadFailed, BackendUnavailable, BackendWriteFailed
from .keys import ensure_storage_key

logger = structlog.get_logger(__name__)

# "Requested action not taken. File unavailable."
FTP_FILE_UNAVAILABLE = "550"


def _is_file_unavailable(exc: BaseException) -> bool:
    return isinstance(exc, ftplib.error_perm) and str(exc)[:3] == FTP_FILE_UNAVAILABLE


class FTPStorageBackend(StorageBackend):
    """
    Backend writing files under a remote directory of an FTP server.

    Each operation opens a fresh connection, logs in, enters (creating if
    needed) the base directory, performs one transfer and closes. Nothing is
    pooled between calls.
    """

    name = "ftp"

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        base_dir: str = "/",
        port: int = 21,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self._password = password
        self.base_dir = base_dir or "/"
        logger.info("ftp_storage.initialized", host=host, port=port, base_dir=self.base_dir)

    def remote_path(self, storage_key: str) -> str:
        return posixpath.join(self.base_dir, storage_key)

    @contextlib.contextmanager
    def _session(self) -> Iterator[ftplib.FTP]:
        ftp = ftplib.FTP()
        try:
            ftp.connect(self.host, self.port)
        except ftplib.all_errors as exc:
            # No control connection, so there is nobody to send QUIT to.
            ftp.close()
            raise BackendUnavailable(
                self.name, f"cannot connect to {self.host}:{self.port}", detail=str(exc)
            ) from exc

        try:
            try:
                ftp.login(self.user, self._password)
            except ftplib.all_errors as exc:
                raise BackendUnavailable(
                    self.name, f"cannot log in to {self.host}:{self.port}", detail=str(exc)
                ) from exc
            self._ensure_dir(ftp)
            yield ftp
        finally:
            with contextlib.suppress(*ftplib.all_errors):
                ftp.quit()
            ftp.close()

    def _ensure_dir(self, ftp: ftplib.FTP) -> None:
        """Enter base_dir, creating each missing segment on the way."""
        try:
            if self.base_dir.startswith("/"):
                ftp.cwd("/")
            for part in (segment for segment in self.base_dir.split("/") if segment):
                try:
                    ftp.cwd(part)
                except ftplib.error_perm:
                    ftp.mkd(part)
                    ftp.cwd(part)
        except ftplib.all_errors as exc:
            raise BackendUnavailable(
                self.name, f"cannot enter base directory {self.base_dir}", detail=str(exc)
            ) from exc

    def store(self, identifier: str, data: bytes) -> str:
        storage_key = self.key_for(identifier)
        with self._session() as ftp:
            try:
                ftp.storbinary(f"STOR {storage_key}", io.BytesIO(data))
            except ftplib.all_errors as exc:
                raise BackendWriteFailed(
                    self.name, f"upload failed for {self.remote_path(storage_key)}", detail=str(exc)
                ) from exc
        logger.debug("ftp_storage.stored", key=storage_key, size=len(data))
        return storage_key

    def fetch(self, storage_key: str) -> bytes | None:
        ensure_storage_key(storage_key)
        buffer = io.BytesIO()
        with self._session() as ftp:
            try:
                ftp.retrbinary(f"RETR {storage_key}", buffer.write)
            except ftplib.all_errors as exc:
                if _is_file_unavailable(exc):
                    logger.debug("ftp_storage.not_found", key=storage_key)
                    return None
                raise BackendReadFailed(
                    self.name, f"download failed for {self.remote_path(storage_key)}", detail=str(exc)
                ) from exc
        return buffer.getvalue()

    def remove(self, storage_key: str) -> None:
        ensure_storage_key(storage_key)
        with self._session() as ftp:
            try:
                ftp.delete(storage_key)
            except ftplib.all_errors as exc:
                if _is_file_unavailable(exc):
                    return
                raise BackendWriteFailed(
                    self.name, f"delete failed for {self.remote_path(storage_key)}", detail=str(exc)
                ) from exc
        logger.debug("ftp_storage.deleted", key=storage_key)
