from src.core.auth.models import Profile, ProfileStatus, User, UserRole
from src.core.auth.service import AuthService
from src.core.auth.jwt import create_access_token, create_refresh_token, decode_token
from src.core.auth.dependencies import get_current_profile, require_module, require_roles
from src.core.auth.permissions import can_access_module
from src.core.auth.views import select_view

__all__ = [
    "Profile",
    "ProfileStatus",
    "User",
    "UserRole",
    "AuthService",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "get_current_profile",
    "require_module",
    "require_roles",
    "can_access_module",
    "select_view",
]
