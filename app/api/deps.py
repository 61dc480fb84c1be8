import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import Depends, Header, HTTPException, Request, status

from app.core.config import settings
from app.core.security import UserRole, get_user_role, verify_api_key
from app.services.logger import StructuredLogger

logger = logging.getLogger(__name__)


def get_structured_logger(request: Request) -> StructuredLogger:
    """The application's structured logger, created in create_app()."""
    return request.app.state.structured_logger


async def require_api_key(
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """
    Require a valid X-API-Key header.

    Usage in endpoints:
        _: Annotated[None, Depends(require_api_key)]
    """
    if not x_api_key:
        logger.warning("Missing API Key header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API Key is missing",
        )

    if not verify_api_key(x_api_key, settings.SERVER_API_KEY):
        logger.warning("Invalid API Key provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API Key",
        )


def require_roles(*roles: UserRole | str) -> Callable[[Request], Awaitable[Any]]:
    """
    Build a dependency that only lets through users holding one of `roles`.

    The authenticated user is read from request.state.user, which an
    authentication layer is expected to populate. With no roles the
    dependency allows every request.

    Usage in endpoints:
        user: Annotated[Any, Depends(require_roles(UserRole.ADMIN))]
    """
    allowed = {role.value if isinstance(role, UserRole) else role for role in roles}

    async def dependency(request: Request) -> Any:
        user = getattr(request.state, "user", None)
        if not allowed:
            return user

        if get_user_role(user) not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden resource",
            )
        return user

    return dependency


async def get_platform(
    x_platform_key: Annotated[str | None, Header()] = None,
) -> str | None:
    """Value of the X-Platform-Key header, if the client sent one."""
    return x_platform_key


Platform = Annotated[str | None, Depends(get_platform)]
