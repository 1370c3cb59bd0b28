"""AWS Signature Version 4 request signing for S3-compatible object stores.

Only the subset needed for single-object PUT/GET/DELETE is implemented:
path-style URIs, an empty query string, and exactly three signed headers
(``host``, ``x-amz-content-sha256``, ``x-amz-date``). Every value here is
derived per request and discarded afterwards.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
TERMINATOR = "aws4_request"
SIGNED_HEADER_NAMES: tuple[str, ...] = ("host", "x-amz-content-sha256", "x-amz-date")


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def amz_date(moment: datetime) -> str:
    """Format as ``YYYYMMDDTHHMMSSZ``."""
    return _utc(moment).strftime("%Y%m%dT%H%M%SZ")


def date_stamp(moment: datetime) -> str:
    """Format as ``YYYYMMDD``."""
    return _utc(moment).strftime("%Y%m%d")


def hash_payload(payload: bytes | str) -> str:
    """Hex SHA-256 of the request body; bodiless requests hash ``b""``."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def canonical_headers(headers: dict[str, str]) -> tuple[str, str]:
    """Return ``(canonical_headers, signed_header_names)`` for the signed subset.

    Names are lowercased and sorted, values trimmed. Headers outside
    ``SIGNED_HEADER_NAMES`` are ignored even if present.
    """
    lowered = {name.lower(): value.strip() for name, value in headers.items()}
    names = sorted(name for name in SIGNED_HEADER_NAMES if lowered.get(name))
    block = "".join(f"{name}:{lowered[name]}\n" for name in names)
    return block, ";".join(names)


def canonical_request(
    method: str,
    uri: str,
    query_string: str,
    headers: dict[str, str],
    payload_hash: str,
) -> str:
    block, signed_names = canonical_headers(headers)
    return "\n".join([method.upper(), uri, query_string, block, signed_names, payload_hash])


def credential_scope(stamp: str, region: str, service: str = SERVICE) -> str:
    return f"{stamp}/{region}/{service}/{TERMINATOR}"


def string_to_sign(request_date: str, scope: str, canonical: str) -> str:
    hashed = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return "\n".join([ALGORITHM, request_date, scope, hashed])


def signing_key(secret_key: str, stamp: str, region: str, service: str = SERVICE) -> bytes:
    """Derive the per-day signing key from the long-lived secret."""
    k_date = _hmac(f"AWS4{secret_key}".encode("utf-8"), stamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, TERMINATOR)


def authorization_header(access_key: str, scope: str, signed_names: str, signature: str) -> str:
    return f"{ALGORITHM} Credential={access_key}/{scope}, SignedHeaders={signed_names}, Signature={signature}"


@dataclass(frozen=True)
class SigV4Signer:
    """Signs single-object requests with long-lived credentials."""

    access_key: str
    secret_key: str
    region: str = "us-east-1"
    service: str = SERVICE

    def __repr__(self) -> str:
        return f"SigV4Signer(access_key={self.access_key!r}, region={self.region!r}, service={self.service!r})"

    def sign(
        self,
        method: str,
        host: str,
        uri: str,
        payload: bytes = b"",
        now: datetime | None = None,
    ) -> dict[str, str]:
        """
        Compute the signed headers for one request.

        Args:
            method: HTTP verb (``PUT``, ``GET``, ``DELETE``)
            host: Host header value, including a non-default port
            uri: Canonical path, e.g. ``/bucket/key``
            payload: Request body (empty for GET/DELETE)
            now: Signing time, defaults to the current UTC time

        Returns:
            ``host``, ``x-amz-content-sha256``, ``x-amz-date`` and ``Authorization``
        """
        moment = now or datetime.now(timezone.utc)
        request_date = amz_date(moment)
        stamp = date_stamp(moment)
        payload_hash = hash_payload(payload)

        headers = {
            "host": host,
            "x-amz-content-sha256": payload_hash,
            "x-amz-date": request_date,
        }
        canonical = canonical_request(method, uri, "", headers, payload_hash)
        _, signed_names = canonical_headers(headers)
        scope = credential_scope(stamp, self.region, self.service)
        to_sign = string_to_sign(request_date, scope, canonical)
        key = signing_key(self.secret_key, stamp, self.region, self.service)
        signature = hmac.new(key, to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        headers["Authorization"] = authorization_header(self.access_key, scope, signed_names, signature)
        return headers
