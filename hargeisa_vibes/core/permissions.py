"""Role-based access control and permissions."""

from enum import Enum


class UserRole(str, Enum):
    """User roles in the system."""

    CUSTOMER = "customer"
    MODERATOR = "moderator"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Permission(str, Enum):
    """Admin panel permissions."""

    ALL = "*"
    READ = "read"
    UPDATE = "update"


# Roles allowed to sign in to the admin panel
ADMIN_PANEL_ROLES = {UserRole.MODERATOR, UserRole.ADMIN, UserRole.SUPER_ADMIN}

# Roles holding every permission; granting or editing them needs "*"
PRIVILEGED_ROLES = {UserRole.ADMIN, UserRole.SUPER_ADMIN}

ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.CUSTOMER: set(),
    UserRole.MODERATOR: {Permission.READ, Permission.UPDATE},
    UserRole.ADMIN: {Permission.ALL},
    UserRole.SUPER_ADMIN: {Permission.ALL},
}


def _role(role: str | UserRole) -> UserRole | None:
    try:
        return UserRole(role)
    except ValueError:
        return None


def get_role_permissions(role: str | UserRole) -> set[Permission]:
    """Get all permissions for a role."""
    resolved = _role(role)
    if resolved is None:
        return set()
    return ROLE_PERMISSIONS.get(resolved, set())


def has_permission(role: str | UserRole, permission: Permission) -> bool:
    """Check whether a role grants a permission. ``*`` grants everything."""
    granted = get_role_permissions(role)
    return Permission.ALL in granted or permission in granted


def can_use_admin_panel(role: str | UserRole) -> bool:
    return _role(role) in ADMIN_PANEL_ROLES


def is_privileged_role(role: str | UserRole) -> bool:
    return _role(role) in PRIVILEGED_ROLES


def permission_names(role: str | UserRole) -> list[str]:
    """Permissions as the sorted list of strings returned to the admin UI."""
    return sorted(p.value for p in get_role_permissions(role))
