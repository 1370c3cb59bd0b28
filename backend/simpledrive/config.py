"""Application settings and environment configuration."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

StorageBackendName = Literal["local", "db", "s3", "ftp"]

# Environment variables each backend cannot start without.
REQUIRED_BACKEND_SETTINGS: dict[str, tuple[str, ...]] = {
    "local": ("local_dir",),
    "db": ("database_url",),
    "s3": ("s3_endpoint", "s3_bucket", "s3_access_key", "s3_secret_key"),
    "ftp": ("ftp_host", "ftp_user", "ftp_password"),
}


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    env: str = "development"

    database_url: str = "sqlite:///./data/simpledrive.db"
    storage_backend: StorageBackendName = "local"

    local_dir: str = "/data/blobs"

    # S3-compatible object store, addressed path-style (MinIO, Ceph RGW, ...)
    s3_endpoint: str = ""
    s3_bucket: str = ""
    s3_access_key: str = ""
    s3_secret_key: str = ""
    s3_region: str = "us-east-1"

    ftp_host: str = ""
    ftp_port: int = Field(default=21, ge=1, le=65535)
    ftp_user: str = ""
    ftp_password: str = ""
    ftp_dir: str = "/"

    log_level: str = "INFO"
    log_json: bool = True

    @model_validator(mode="after")
    def validate_backend_settings(self) -> "Settings":
        """Fail fast when the selected backend is missing mandatory settings."""
        for field_name in REQUIRED_BACKEND_SETTINGS[self.storage_backend]:
            value = getattr(self, field_name)
            if not str(value).strip():
                raise ValueError(
                    f"Missing required environment variable: {field_name.upper()} "
                    f"(STORAGE_BACKEND={self.storage_backend})"
                )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
