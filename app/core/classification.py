"""
Exception classification.

Turns a caught value of unknown shape into an ExceptionRecord
(status, message, severity). Classification never raises: every input,
including None and primitives, resolves to a record.
"""

import json
from enum import Enum
from typing import Any

from fastapi import status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException, ExceptionRecord
from app.core.severity import ErrorSeverity

DEFAULT_STATUS = status.HTTP_500_INTERNAL_SERVER_ERROR


class FailureKind(str, Enum):
    TYPED_APP_ERROR = "typed_app_error"
    HTTP_ERROR = "http_error"
    NATIVE_ERROR = "native_error"
    PLAIN_OBJECT = "plain_object"
    OTHER = "other"


def categorize_failure(value: Any) -> FailureKind:
    """Pick the failure category. Order matters: AppException is also an HTTPException."""
    if isinstance(value, AppException):
        return FailureKind.TYPED_APP_ERROR
    if isinstance(value, (StarletteHTTPException, RequestValidationError)):
        return FailureKind.HTTP_ERROR
    if isinstance(value, BaseException):
        return FailureKind.NATIVE_ERROR
    if isinstance(value, (dict, list, tuple)):
        return FailureKind.PLAIN_OBJECT
    return FailureKind.OTHER


def safe_str(value: Any) -> str:
    """str() that falls back to the type name when __str__ itself fails."""
    try:
        return str(value)
    except Exception:
        return type(value).__name__


def to_compact_json(value: Any) -> str:
    """Serialize to compact JSON, stringifying anything JSON does not understand."""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=safe_str)
    except (TypeError, ValueError):
        # Circular references or unserializable keys
        return safe_str(value)


def _http_status_and_body(exc: StarletteHTTPException | RequestValidationError) -> tuple[int, Any]:
    if isinstance(exc, RequestValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY, exc.errors()
    return exc.status_code, exc.detail


def classify_exception(value: Any) -> ExceptionRecord:
    """Derive (status, message, severity) from a caught failure."""
    kind = categorize_failure(value)

    match kind:
        case FailureKind.TYPED_APP_ERROR:
            return ExceptionRecord(
                status=value.status_code,
                message=value.message,
                severity=value.severity,
            )
        case FailureKind.HTTP_ERROR:
            code, body = _http_status_and_body(value)
            if isinstance(body, str):
                message = body
            elif body is None:
                message = to_compact_json({"message": safe_str(value)})
            else:
                message = to_compact_json(body)
            return ExceptionRecord(status=code, message=message)
        case FailureKind.NATIVE_ERROR:
            return ExceptionRecord(
                status=DEFAULT_STATUS,
                message=safe_str(value) or type(value).__name__,
            )
        case FailureKind.PLAIN_OBJECT:
            return ExceptionRecord(status=DEFAULT_STATUS, message=to_compact_json(value))
        case _:
            return ExceptionRecord(status=DEFAULT_STATUS, message=safe_str(value))
