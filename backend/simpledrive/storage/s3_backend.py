"""S3-compatible storage backend (MinIO, Ceph RGW, AWS S3) over plain httpx."""

from __future__ import annotations

import httpx
import structlog

from .base import StorageBackend
from .errors import BackendError, BackendReadFailed, BackendUnavailable, BackendWriteFailed
from .keys import ensure_storage_key
from .sigv4 import SigV4Signer

logger = structlog.get_logger(__name__)

_MAX_ERROR_BODY = 512


class S3StorageBackend(StorageBackend):
    """
    Backend issuing hand-signed SigV4 requests against one bucket.

    Addressing is always path-style (``{endpoint}/{bucket}/{key}``) so that
    stores reachable only by IP or a plain hostname work without bucket DNS.
    A new HTTP connection is opened per call and there is no retry or
    clock-skew compensation.
    """

    name = "s3"

    def __init__(
        self,
        endpoint: str,
        bucket: str,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.bucket = bucket
        self.region = region
        self._signer = SigV4Signer(access_key=access_key, secret_key=secret_key, region=region)
        self._transport = transport

        url = httpx.URL(self.endpoint)
        self.host = url.host if url.port is None else f"{url.host}:{url.port}"
        logger.info("s3_backend.initialized", endpoint=self.endpoint, bucket=bucket, region=region)

    def object_path(self, storage_key: str) -> str:
        return f"/{self.bucket}/{storage_key}"

    def object_url(self, storage_key: str) -> str:
        return f"{self.endpoint}{self.object_path(storage_key)}"

    def _request(
        self,
        method: str,
        storage_key: str,
        failure: type[BackendError],
        body: bytes | None = None,
    ) -> httpx.Response:
        path = self.object_path(storage_key)
        headers = self._signer.sign(method, self.host, path, body or b"")
        if body is not None:
            # Sent on the wire, not signed.
            headers["content-type"] = "application/octet-stream"
            headers["content-length"] = str(len(body))

        try:
            with httpx.Client(timeout=None, transport=self._transport) as client:
                return client.request(method, self.object_url(storage_key), headers=headers, content=body)
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise BackendUnavailable(self.name, f"cannot reach {self.endpoint}", detail=str(exc)) from exc
        except httpx.HTTPError as exc:
            logger.warning("s3.request_failed", method=method, key=storage_key, error=str(exc))
            raise failure(self.name, f"{method} {path} failed", detail=str(exc)) from exc

    @staticmethod
    def _error_body(response: httpx.Response) -> str:
        return response.text[:_MAX_ERROR_BODY]

    def store(self, identifier: str, data: bytes) -> str:
        storage_key = self.key_for(identifier)
        response = self._request("PUT", storage_key, BackendWriteFailed, body=bytes(data))
        if not response.is_success:
            logger.warning("s3.put_rejected", key=storage_key, status=response.status_code)
            raise BackendWriteFailed(
                self.name,
                f"PUT {self.object_path(storage_key)} failed",
                status=response.status_code,
                detail=self._error_body(response),
            )
        logger.debug("s3.stored", key=storage_key, size=len(data))
        return storage_key

    def fetch(self, storage_key: str) -> bytes | None:
        ensure_storage_key(storage_key)
        response = self._request("GET", storage_key, BackendReadFailed)
        if response.status_code == 404:
            logger.debug("s3.not_found", key=storage_key)
            return None
        if not response.is_success:
            logger.warning("s3.get_rejected", key=storage_key, status=response.status_code)
            raise BackendReadFailed(
                self.name,
                f"GET {self.object_path(storage_key)} failed",
                status=response.status_code,
                detail=self._error_body(response),
            )
        return response.content

    def remove(self, storage_key: str) -> None:
        ensure_storage_key(storage_key)
        response = self._request("DELETE", storage_key, BackendWriteFailed)
        if response.status_code not in (204, 404):
            logger.warning("s3.delete_rejected", key=storage_key, status=response.status_code)
            raise BackendWriteFailed(
                self.name,
                f"DELETE {self.object_path(storage_key)} failed",
                status=response.status_code,
                detail=self._error_body(response),
            )
        logger.debug("s3.deleted", key=storage_key)
