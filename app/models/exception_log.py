"""
Exception log model for persisted log events.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, UUIDMixin

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class ExceptionLog(Base, UUIDMixin, TimestampMixin):
    """Append-only record of a log event emitted with save_to_db."""

    __tablename__ = "exception_logs"

    # timestamp is when the event was emitted (created_at is when the row was stored)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    context: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    severity: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # debug .. fatal
    # "metadata" is reserved on declarative classes, so the attribute is renamed
    log_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    cause: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    __table_args__ = (
        Index("idx_exception_logs_timestamp_desc", timestamp.desc()),
    )
