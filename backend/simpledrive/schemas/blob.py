"""Pydantic schemas for blob metadata and payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BlobRecord(BaseModel):
    """Metadata stored alongside a blob."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(min_length=1, max_length=512)
    backend: str
    storage_key: str = Field(pattern=r"^[0-9a-f]{64}$")
    size_bytes: int = Field(ge=0)
    checksum_sha256: str
    created_at: datetime


class BlobPayload(BaseModel):
    """Metadata plus the bytes read back from the backend."""

    record: BlobRecord
    data: bytes
