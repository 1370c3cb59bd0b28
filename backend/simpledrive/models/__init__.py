"""SQLAlchemy model exports."""

from __future__ import annotations

from simpledrive.models.blob import Blob
from simpledrive.models.blob_data import BlobData

__all__ = ["Blob", "BlobData"]
