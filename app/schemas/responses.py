"""
Response envelopes shared by all endpoints.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class APIResponse(CamelModel, Generic[T]):
    """Standard success envelope."""

    is_success: bool = Field(description="Whether the request was successful", examples=[True])
    message: str = Field(description="The message of the response", examples=["The request was successful"])
    data: T | None = Field(default=None, description="Optional returned data")


class PaginatedAPIResponse(APIResponse[list[T]], Generic[T]):
    """Success envelope for one page of a list."""

    total: int = Field(ge=0, description="Total number of items available")
    page: int = Field(ge=1, description="Current page number")
    page_size: int = Field(ge=1, description="Number of items per page")


class ErrorResponse(CamelModel):
    """Error envelope for endpoints that report failures in-band."""

    is_success: Literal[False] = False
    message: str
    error_code: str | None = None
    details: dict[str, Any] | None = None


class HttpErrorResponse(BaseModel):
    """Body written by the global exception pipeline for every failed request."""

    statusCode: int
    timestamp: datetime
    path: str
    message: str


class HealthResponse(BaseModel):
    status: str
