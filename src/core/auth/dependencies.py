from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.jwt import decode_token, session_from_token
from src.core.auth.models import Profile, User, UserRole
from src.core.auth.permissions import can_access_module
from src.core.auth.service import AuthService
from src.core.auth.views import AuthSession
from src.core.database import get_db
from src.core.exceptions import AuthenticationError, AuthorizationError


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError("Authorization header required")

    if not authorization.startswith("Bearer "):
        raise AuthenticationError("Invalid authorization header format")

    return authorization.replace("Bearer ", "")


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency to get current authenticated user from JWT token."""
    payload = decode_token(_bearer_token(authorization), token_type="access")
    user_id = int(payload["sub"])

    auth_service = AuthService(db)
    user = await auth_service.get_user_by_id(user_id)

    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


async def get_current_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """
    Dependency returning the role profile of the authenticated user.

    Usage:
        @router.get("/me")
        async def get_me(profile: Profile = Depends(get_current_profile)):
            return profile
    """
    profile = await AuthService(db).get_profile(user.id)
    if not profile:
        raise AuthenticationError("User has no profile")
    return profile


async def get_optional_session(
    authorization: Annotated[str | None, Header()] = None,
) -> AuthSession | None:
    """Session for a valid bearer token, None otherwise (never raises)."""
    try:
        return session_from_token(_bearer_token(authorization))
    except AuthenticationError:
        return None


def require_roles(*roles: UserRole):
    """
    Dependency factory to require specific roles.

    Usage:
        @router.post("/users")
        async def create_user(
            profile: Profile = Depends(require_roles(UserRole.ADMIN))
        ):
            ...
    """

    async def role_checker(
        current_profile: Profile = Depends(get_current_profile),
    ) -> Profile:
        if not current_profile.has_role(*roles):
            allowed = ", ".join(r.value for r in roles)
            raise AuthorizationError(f"Required role: {allowed}")
        return current_profile

    return role_checker


def require_module(module: str):
    """Dependency factory checking the module permission table for the current role."""

    async def module_checker(
        current_profile: Profile = Depends(get_current_profile),
    ) -> Profile:
        if not can_access_module(current_profile.role, module):
            raise AuthorizationError(f"Role {current_profile.role} cannot access {module}")
        return current_profile

    return module_checker


# Convenience dependencies
CurrentProfile = Annotated[Profile, Depends(get_current_profile)]
AdminProfile = Annotated[Profile, Depends(require_roles(UserRole.ADMIN))]
