"""
Structured logger with optional alerting and persistence.

Usage:
    from app.services.logger import LogEventPayload, LogOptions

    logger.error(
        "Payment provider rejected the charge",
        LogEventPayload(
            context="BillingService",
            metadata={"order_id": order_id},
            cause=exc,
            options=LogOptions(send_alert=True, save_to_db=True),
        ),
    )

Every call formats a human-readable record and writes it synchronously to
the stdlib logger at the severity's channel. When requested, the record is
then fanned out to the notifier and the log sink. Each fan-out runs as its
own asyncio task with its own failure boundary: a failure is written to the
console only and never triggers another alert or persistence attempt.

Calls made from worker threads (sync endpoints run in the threadpool) hand
the fan-out to the event loop bound with bind_loop(), so the calling thread
never waits on alert or database I/O.
"""

import asyncio
import json
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.core.severity import ErrorSeverity, severity_channel, severity_display
from app.services.alerting import Notifier, NotifierNotConfiguredError
from app.services.log_sink import LogSink, PersistedLogRecord, normalize_cause

DEFAULT_CONTEXT = "General"
ALERT_CONTEXT = "AlertNotifier"
SINK_CONTEXT = "ExceptionLogService"


@dataclass(frozen=True)
class LogOptions:
    send_alert: bool = False
    save_to_db: bool = False


@dataclass
class LogEventPayload:
    """Optional context attached to a log call."""

    # Service or feature name, e.g. "AuthService"
    context: str | None = None
    # Structured where/when/who/what for filtering and debugging
    metadata: dict[str, Any] | None = None
    # Raw request bodies or third-party payloads
    data: dict[str, Any] | None = None
    cause: BaseException | str | None = None
    options: LogOptions | None = None


@dataclass(frozen=True)
class LogEvent:
    message: str
    severity: ErrorSeverity
    context: str = DEFAULT_CONTEXT
    metadata: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    cause: BaseException | str | None = None
    options: LogOptions = field(default_factory=LogOptions)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def build(
        cls,
        message: str,
        payload: LogEventPayload | None,
        severity: ErrorSeverity,
    ) -> "LogEvent":
        payload = payload or LogEventPayload()
        return cls(
            message=message,
            severity=severity,
            context=payload.context if payload.context is not None else DEFAULT_CONTEXT,
            metadata=dict(payload.metadata or {}),
            data=dict(payload.data or {}),
            cause=payload.cause,
            options=payload.options or LogOptions(),
        )

    def to_record(self) -> PersistedLogRecord:
        return PersistedLogRecord(
            message=self.message,
            context=self.context,
            severity=self.severity,
            metadata=self.metadata,
            data=self.data,
            cause=normalize_cause(self.cause),
            timestamp=self.timestamp,
        )


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def format_log_message(event: LogEvent) -> str:
    """Render an event as the multi-line record used for console output and alerts."""
    icon, label = severity_display(event.severity)

    formatted = f"{icon} [{label}] {event.context}\n📝 {event.message}"

    if event.metadata:
        formatted += f"\n\n🧩 Metadata:\n{_pretty(event.metadata)}"

    if event.data:
        formatted += f"\n\n📦 Data:\n{_pretty(event.data)}"

    if event.cause is not None:
        formatted += f"\n\n💥 Cause:\n{_pretty(normalize_cause(event.cause))}"

    return formatted


@dataclass
class _Fanout:
    """Scheduled fan-out tasks and the event loop that runs them, shared by child loggers."""

    tasks: set[asyncio.Task] = field(default_factory=set)
    loop: asyncio.AbstractEventLoop | None = None


class StructuredLogger:
    """Severity-aware logger that fans records out to a notifier and a log sink."""

    def __init__(
        self,
        name: str = "LoggerService",
        *,
        log_sink: LogSink | None = None,
        notifier: Notifier | None = None,
        fanout_timeout: float | None = None,
    ):
        self.name = name
        self.log_sink = log_sink
        self.notifier = notifier
        self.fanout_timeout = fanout_timeout
        self._logger = logging.getLogger(name)
        self._fanout = _Fanout()

    def with_name(self, name: str) -> "StructuredLogger":
        """Return a logger writing under `name` that shares this logger's sink, notifier and tasks."""
        child = StructuredLogger(
            name,
            log_sink=self.log_sink,
            notifier=self.notifier,
            fanout_timeout=self.fanout_timeout,
        )
        child._fanout = self._fanout
        return child

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Run fan-out scheduled from worker threads on `loop` (the server's event loop)."""
        self._fanout.loop = loop

    def fatal(self, message: str, payload: LogEventPayload | None = None) -> LogEvent:
        return self.emit(message, payload, ErrorSeverity.FATAL)

    def error(self, message: str, payload: LogEventPayload | None = None) -> LogEvent:
        return self.emit(message, payload, ErrorSeverity.ERROR)

    def warn(self, message: str, payload: LogEventPayload | None = None) -> LogEvent:
        return self.emit(message, payload, ErrorSeverity.WARN)

    def info(self, message: str, payload: LogEventPayload | None = None) -> LogEvent:
        return self.emit(message, payload, ErrorSeverity.INFO)

    def debug(self, message: str, payload: LogEventPayload | None = None) -> LogEvent:
        return self.emit(message, payload, ErrorSeverity.DEBUG)

    def emit(
        self,
        message: str,
        payload: LogEventPayload | None = None,
        severity: ErrorSeverity = ErrorSeverity.INFO,
    ) -> LogEvent:
        """Write the event to the console, then schedule the requested fan-out."""
        event = LogEvent.build(message, payload, severity)
        formatted = format_log_message(event)

        # Console write always happens, and always before any fan-out starts
        self._logger.log(severity_channel(severity), formatted)

        if event.options.send_alert:
            self._dispatch(self._send_alert(formatted))

        if event.options.save_to_db:
            self._dispatch(self._persist(event))

        return event

    @property
    def pending(self) -> int:
        return len(self._fanout.tasks)

    async def drain(self) -> None:
        """Wait for every scheduled alert and persistence task to finish."""
        while self._fanout.tasks:
            await asyncio.gather(*list(self._fanout.tasks), return_exceptions=True)

    def _dispatch(self, coro: Coroutine[Any, Any, None]) -> None:
        fanout = self._fanout
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            if fanout.loop is None or not fanout.loop.is_running():
                fanout.loop = loop
            self._spawn(coro)
        elif fanout.loop is not None and fanout.loop.is_running():
            # Sync endpoint in the threadpool: hand the fan-out to the server loop
            fanout.loop.call_soon_threadsafe(self._spawn, coro)
        else:
            # No running loop is bound (scripts, CLI tools): run the fan-out inline
            asyncio.run(coro)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._fanout.tasks.add(task)
        task.add_done_callback(self._fanout.tasks.discard)

    async def _bounded(self, coro: Coroutine[Any, Any, None]) -> None:
        if self.fanout_timeout:
            await asyncio.wait_for(coro, timeout=self.fanout_timeout)
        else:
            await coro

    async def _send_alert(self, text: str) -> None:
        if self.notifier is None:
            self.warn("Alert requested but no notifier is configured", LogEventPayload(context=ALERT_CONTEXT))
            return

        # Failure writes below carry no options, so they cannot alert or persist again
        try:
            await self._bounded(self.notifier.notify(text))
        except NotifierNotConfiguredError as e:
            self.warn("Alert skipped", LogEventPayload(context=ALERT_CONTEXT, cause=e))
        except Exception as e:
            self.error("Failed to send alert", LogEventPayload(context=ALERT_CONTEXT, cause=e))

    async def _persist(self, event: LogEvent) -> None:
        if self.log_sink is None:
            self.warn("Persistence requested but no log sink is configured", LogEventPayload(context=SINK_CONTEXT))
            return

        try:
            await self._bounded(self.log_sink.append(event.to_record()))
        except Exception as e:
            self.error(
                "Failed to save log",
                LogEventPayload(
                    context=SINK_CONTEXT,
                    metadata=event.metadata,
                    data=event.data,
                    cause=e,
                ),
            )
