from app.schemas.responses import (
    APIResponse,
    ErrorResponse,
    HealthResponse,
    HttpErrorResponse,
    PaginatedAPIResponse,
)

__all__ = [
    "APIResponse",
    "ErrorResponse",
    "HealthResponse",
    "HttpErrorResponse",
    "PaginatedAPIResponse",
]
