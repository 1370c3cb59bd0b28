"""SQLAlchemy model for blob payloads persisted by the table backend."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String, func
from sqlalchemy.orm import Mapped, mapped_column

from simpledrive.database import Base


class BlobData(Base):
    """One payload row addressed by its storage key."""

    __tablename__ = "blob_data_store"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    # Refreshed on every upsert.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
