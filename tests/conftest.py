"""Pytest fixtures for backend tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import AppException
from app.core.severity import ErrorSeverity
from app.main import create_app
from app.services.alerting import Notifier, NotifierError
from app.services.log_sink import LogSink, PersistedLogRecord
from app.services.logger import StructuredLogger


class RecordingLogSink(LogSink):
    """Log sink keeping records in memory, optionally failing every append."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: list[PersistedLogRecord] = []
        self.attempts = 0

    async def append(self, record: PersistedLogRecord) -> None:
        self.attempts += 1
        if self.fail:
            raise ConnectionError("exception_logs insert failed")
        self.records.append(record)


class RecordingNotifier(Notifier):
    """Notifier keeping every attempted message, optionally failing every delivery."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: list[str] = []

    async def notify(self, text: str) -> None:
        self.messages.append(text)
        if self.fail:
            raise NotifierError("Telegram request failed: ConnectError: network unreachable")


@pytest.fixture
def log_sink() -> RecordingLogSink:
    return RecordingLogSink()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_log_sink() -> RecordingLogSink:
    return RecordingLogSink(fail=True)


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)


@pytest.fixture
def structured_logger(log_sink: RecordingLogSink, notifier: RecordingNotifier) -> StructuredLogger:
    return StructuredLogger("TestLogger", log_sink=log_sink, notifier=notifier)


def add_failing_routes(app: FastAPI) -> None:
    """Endpoints raising each kind of failure the exception pipeline classifies."""

    async def mongo_failure():
        raise RuntimeError("MongoDB connection refused")

    async def invalid_email():
        raise AppException("Invalid email", 400, ErrorSeverity.WARN)

    async def missing_item():
        raise HTTPException(status_code=404, detail="Item not found")

    async def conflict():
        raise HTTPException(status_code=409, detail={"code": "CONFLICT", "field": "email"})

    async def empty_value_error():
        raise ValueError()

    async def typed_count(count: int):
        return {"count": count}

    app.add_api_route("/boom/mongo", mongo_failure)
    app.add_api_route("/boom/invalid-email", invalid_email)
    app.add_api_route("/boom/missing", missing_item)
    app.add_api_route("/boom/conflict", conflict, methods=["POST"])
    app.add_api_route("/boom/empty", empty_value_error)
    app.add_api_route("/boom/typed", typed_count)


@pytest.fixture
def test_app(structured_logger: StructuredLogger) -> FastAPI:
    app = create_app(structured_logger)
    add_failing_routes(app)
    return app


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Test client that never re-raises application exceptions."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac
