"""Pydantic schemas exports."""

from __future__ import annotations

from simpledrive.schemas.blob import BlobPayload, BlobRecord

__all__ = ["BlobPayload", "BlobRecord"]
