"""Which role may open which module."""

from src.core.auth.models import UserRole

_ALL_ROLES = frozenset(UserRole)

MODULE_ACCESS: dict[str, frozenset[UserRole]] = {
    "dashboard": _ALL_ROLES,
    "students": frozenset({UserRole.ADMIN}),
    "teachers": frozenset({UserRole.ADMIN}),
    "spp": frozenset({UserRole.ADMIN}),
    "savings": frozenset({UserRole.ADMIN, UserRole.KOMITE}),
    "expenses": frozenset({UserRole.ADMIN}),
    "donations": frozenset({UserRole.ADMIN}),
    "reports": frozenset({UserRole.ADMIN}),
    "cash": frozenset({UserRole.ADMIN, UserRole.KOMITE}),
    "monitoring": frozenset({UserRole.ADMIN, UserRole.KOMITE}),
    "roles": frozenset({UserRole.ADMIN}),
    "my-profile": _ALL_ROLES,
    "my-savings": frozenset({UserRole.SANTRI}),
    "my-payments": frozenset({UserRole.SANTRI}),
    "my-salary": frozenset({UserRole.GURU}),
    "my-assignments": frozenset({UserRole.GURU}),
}


def can_access_module(role: UserRole | str, module: str) -> bool:
    """True if `role` may use `module`. Unknown roles and modules are denied."""
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return role in MODULE_ACCESS.get(module, frozenset())


def modules_for_role(role: UserRole) -> list[str]:
    """Modules available to a role, in menu order."""
    return [module for module, roles in MODULE_ACCESS.items() if role in roles]
