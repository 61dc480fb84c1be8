"""API key verification and role helpers used by the route guards."""

import secrets
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


def verify_api_key(provided: str, expected: str | None) -> bool:
    """Constant-time comparison; a server without a configured key accepts nothing."""
    if not expected:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())


def get_user_role(user: Any) -> str | None:
    """Read the role of an authenticated user stored as an object or a mapping."""
    if user is None:
        return None
    role = user.get("role") if isinstance(user, dict) else getattr(user, "role", None)
    if isinstance(role, Enum):
        return role.value
    return role
