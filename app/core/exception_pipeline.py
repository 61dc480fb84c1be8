"""
Global exception pipeline.

Every failure that escapes an endpoint goes through the same three steps:

1. classify the failure into (status, message, severity),
2. escalate infrastructure-class server errors to FATAL and log the event
   (FATAL always alerts, anything else alerts only for 5xx; every event is
   persisted),
3. answer with {statusCode, timestamp, path, message}.

Logging is best-effort. Alerting and persistence run as background tasks
that the response never waits for, and a failure of the logging step
itself never prevents step 3.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.classification import classify_exception
from app.core.escalation import escalate_severity
from app.core.severity import ErrorSeverity
from app.services.logger import LogEventPayload, LogOptions, StructuredLogger

logger = logging.getLogger(__name__)

PIPELINE_CONTEXT = "GlobalExceptionPipeline"


def now_iso() -> str:
    """UTC timestamp like 2024-05-01T12:00:00.123Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def request_path(request: Request) -> str:
    """Request path including the query string, as the client sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def error_body(status_code: int, path: str, message: str) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "timestamp": now_iso(),
        "path": path,
        "message": message,
    }


class GlobalExceptionPipeline:
    """Turns any failure into a logged event and a uniform JSON error response."""

    def __init__(self, structured_logger: StructuredLogger):
        self.logger = structured_logger.with_name(PIPELINE_CONTEXT)

    def handle(self, request: Request, exc: Any) -> JSONResponse:
        record = classify_exception(exc)
        severity = escalate_severity(record.status, record.message, record.severity)
        path = request_path(request)

        try:
            payload = LogEventPayload(
                context=PIPELINE_CONTEXT,
                metadata={"path": path, "method": request.method, "status": record.status},
                cause=exc if isinstance(exc, BaseException) else None,
            )
            if severity == ErrorSeverity.FATAL:
                payload.options = LogOptions(send_alert=True, save_to_db=True)
                self.logger.fatal(record.message, payload)
            else:
                payload.options = LogOptions(send_alert=record.status >= 500, save_to_db=True)
                self.logger.error(record.message, payload)
        except Exception:
            logger.exception("Failed to log %s %s (status %s)", request.method, path, record.status)

        # Only HTTP exceptions carry headers meant for the client
        headers = exc.headers if isinstance(exc, StarletteHTTPException) else None
        return JSONResponse(
            status_code=record.status,
            content=error_body(record.status, path, record.message),
            headers=headers,
        )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """FastAPI exception handler delegating to the app's pipeline."""
    pipeline: GlobalExceptionPipeline = request.app.state.exception_pipeline
    return pipeline.handle(request, exc)
