"""
Exception log service.

Persists log records emitted with save_to_db into the exception_logs table.

Usage:
    from app.services.exception_log import SqlAlchemyLogSink

    sink = SqlAlchemyLogSink()  # uses the process-wide session factory
    await sink.append(record)
"""

import json
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import get_session_maker
from app.models.exception_log import ExceptionLog
from app.services.log_sink import LogSink, PersistedLogRecord

logger = logging.getLogger(__name__)


def _jsonable(value: dict[str, Any] | None) -> dict[str, Any] | None:
    """Round-trip through JSON so datetimes, UUIDs and other objects are stored as strings."""
    if not value:
        return None
    return json.loads(json.dumps(value, default=str))


class SqlAlchemyLogSink(LogSink):
    """Log sink writing one ExceptionLog row per record, in its own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        # Fall back to the process-wide factory, created on first use
        return self._session_factory or get_session_maker()

    async def append(self, record: PersistedLogRecord) -> None:
        async with self.session_factory() as session:
            session.add(
                ExceptionLog(
                    timestamp=record.timestamp,
                    message=record.message,
                    context=record.context,
                    severity=record.severity.value,
                    log_metadata=_jsonable(record.metadata),
                    data=_jsonable(record.data),
                    cause=record.cause,
                )
            )
            await session.commit()
        logger.debug("Persisted %s log from %s", record.severity.value, record.context)
