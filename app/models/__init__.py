from app.models.exception_log import ExceptionLog

__all__ = [
    "ExceptionLog",
]
