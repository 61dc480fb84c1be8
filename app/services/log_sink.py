"""
Log sink interface.

A log sink is an append-only store for structured log records. The
structured logger writes a PersistedLogRecord to it for every event
emitted with save_to_db enabled.
"""

import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.core.classification import safe_str
from app.core.severity import ErrorSeverity


def normalize_cause(cause: BaseException | str | None) -> dict[str, Any] | None:
    """Project a log cause onto {name, message, stack} / {message} / None."""
    if cause is None:
        return None
    if isinstance(cause, BaseException):
        return {
            "name": type(cause).__name__,
            "message": safe_str(cause),
            "stack": "".join(traceback.format_exception(type(cause), cause, cause.__traceback__)),
        }
    return {"message": safe_str(cause)}


@dataclass(frozen=True)
class PersistedLogRecord:
    """The part of a log event that survives in the sink."""

    message: str
    context: str
    severity: ErrorSeverity
    metadata: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    cause: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class LogSink(ABC):
    """Append-only destination for persisted log records."""

    @abstractmethod
    async def append(self, record: PersistedLogRecord) -> None:
        """Store the record. Raises on failure."""
