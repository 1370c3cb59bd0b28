"""Service layer coordinating storage backends and blob metadata."""

from simpledrive.services.blob_service import BlobAlreadyExists, BlobService, MetadataRepository
from simpledrive.services.metadata_repository import SqlMetadataRepository

__all__ = ["BlobAlreadyExists", "BlobService", "MetadataRepository", "SqlMetadataRepository"]
