"""Health and service information endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import Platform, get_structured_logger, require_api_key
from app.core.config import APP_VERSION, settings
from app.schemas.responses import APIResponse, HealthResponse, HttpErrorResponse
from app.services.logger import LogEventPayload, StructuredLogger

router = APIRouter(tags=["health"], responses={500: {"model": HttpErrorResponse}})


class ServiceInfo(BaseModel):
    name: str
    version: str
    platform: str | None = None


@router.get("/", response_model=HealthResponse, summary="Health check endpoint")
async def health_check():
    return HealthResponse(status=f"{settings.APP_NAME} is running")


@router.get(
    "/info",
    response_model=APIResponse[ServiceInfo],
    responses={401: {"model": HttpErrorResponse}},
    summary="Service name and version",
)
async def service_info(
    _: Annotated[None, Depends(require_api_key)],
    platform: Platform,
    logger: Annotated[StructuredLogger, Depends(get_structured_logger)],
):
    """Requires a valid X-API-Key header. Echoes the caller's X-Platform-Key."""
    logger.debug("Service info requested", LogEventPayload(context="HealthController", metadata={"platform": platform}))
    return APIResponse[ServiceInfo](
        is_success=True,
        message="Service information",
        data=ServiceInfo(name=settings.APP_NAME, version=APP_VERSION, platform=platform),
    )
