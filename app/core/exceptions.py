"""Custom exceptions and error records for the Boilerplate API."""

from dataclasses import dataclass

from fastapi import HTTPException, status

from app.core.severity import ErrorSeverity


class AppException(HTTPException):
    """
    Application error carrying its own HTTP status and severity.

    Usage:
        raise AppException("Invalid email", status.HTTP_400_BAD_REQUEST, ErrorSeverity.WARN)
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ):
        self.message = message
        self.severity = severity
        super().__init__(status_code=status_code, detail=message)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ExceptionRecord:
    """Outcome of classifying a caught failure."""

    status: int
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
