"""Permission registry and role defaults.

Permission keys use the identity provider's ``org:<resource>:<action>``
convention so the same strings can be shown to the web client. This module
is the only place where roles are turned into permissions; client-side
checks are UI hints only.
"""

from dataclasses import dataclass
from enum import Enum


class PermissionKey(str, Enum):
    """All permission keys known to the API."""

    SERVICES_CREATE = "org:services:create"
    SERVICES_READ = "org:services:read"
    SERVICES_UPDATE = "org:services:update"
    SERVICES_DELETE = "org:services:delete"

    INCIDENTS_CREATE = "org:incidents:create"
    INCIDENTS_READ = "org:incidents:read"
    INCIDENTS_UPDATE = "org:incidents:update"
    INCIDENTS_DELETE = "org:incidents:delete"

    MAINTENANCE_CREATE = "org:maintenance:create"
    MAINTENANCE_READ = "org:maintenance:read"
    MAINTENANCE_UPDATE = "org:maintenance:update"
    MAINTENANCE_DELETE = "org:maintenance:delete"

    SETTINGS_MANAGE = "org:settings:manage"
    MEMBERS_MANAGE = "org:members:manage"


class PermissionCategory(str, Enum):
    """Permission categories for UI grouping."""

    SERVICES = "Services"
    INCIDENTS = "Incidents"
    MAINTENANCE = "Maintenance"
    ORGANIZATION = "Organization"


@dataclass(frozen=True)
class PermissionDef:
    """Permission definition with metadata."""

    key: PermissionKey
    label: str
    category: PermissionCategory


P = PermissionKey

PERMISSION_REGISTRY: dict[str, PermissionDef] = {
    d.key.value: d
    for d in (
        PermissionDef(P.SERVICES_CREATE, "Create Services", PermissionCategory.SERVICES),
        PermissionDef(P.SERVICES_READ, "View Services", PermissionCategory.SERVICES),
        PermissionDef(P.SERVICES_UPDATE, "Edit Services", PermissionCategory.SERVICES),
        PermissionDef(P.SERVICES_DELETE, "Delete Services", PermissionCategory.SERVICES),
        PermissionDef(P.INCIDENTS_CREATE, "Report Incidents", PermissionCategory.INCIDENTS),
        PermissionDef(P.INCIDENTS_READ, "View Incidents", PermissionCategory.INCIDENTS),
        PermissionDef(P.INCIDENTS_UPDATE, "Update Incidents", PermissionCategory.INCIDENTS),
        PermissionDef(P.INCIDENTS_DELETE, "Delete Incidents", PermissionCategory.INCIDENTS),
        PermissionDef(P.MAINTENANCE_CREATE, "Schedule Maintenance", PermissionCategory.MAINTENANCE),
        PermissionDef(P.MAINTENANCE_READ, "View Maintenance", PermissionCategory.MAINTENANCE),
        PermissionDef(P.MAINTENANCE_UPDATE, "Edit Maintenance", PermissionCategory.MAINTENANCE),
        PermissionDef(P.MAINTENANCE_DELETE, "Cancel Maintenance", PermissionCategory.MAINTENANCE),
        PermissionDef(P.SETTINGS_MANAGE, "Manage Settings", PermissionCategory.ORGANIZATION),
        PermissionDef(P.MEMBERS_MANAGE, "Manage Members", PermissionCategory.ORGANIZATION),
    )
}


# =============================================================================
# Default Role Permissions
# =============================================================================

_READ_ONLY: frozenset[str] = frozenset(
    {
        P.SERVICES_READ.value,
        P.INCIDENTS_READ.value,
        P.MAINTENANCE_READ.value,
    }
)

ROLE_DEFAULTS: dict[str, frozenset[str]] = {
    "admin": frozenset(PERMISSION_REGISTRY.keys()),
    "member": _READ_ONLY,
    # Alias kept for organizations created with the identity provider's viewer role
    "viewer": _READ_ONLY,
}

DEFAULT_ROLE = "member"

# Granted to the superadmin regardless of organization membership
SUPERADMIN_PERMISSIONS: frozenset[str] = ROLE_DEFAULTS["admin"]


# =============================================================================
# Helper Functions
# =============================================================================

def normalize_role(role: str | None) -> str:
    """Strip the identity provider's ``org:`` prefix; empty means member."""
    if not role:
        return DEFAULT_ROLE
    role = role.strip().lower()
    if role.startswith("org:"):
        role = role[len("org:"):]
    return role or DEFAULT_ROLE


def get_role_default_permissions(role: str | None) -> frozenset[str]:
    """Get permissions for a role. Unknown roles get the member set."""
    return ROLE_DEFAULTS.get(normalize_role(role), ROLE_DEFAULTS[DEFAULT_ROLE])


def is_valid_permission(key: str) -> bool:
    """Check if permission key exists."""
    return key in PERMISSION_REGISTRY


def get_permissions_by_category() -> dict[str, list[PermissionDef]]:
    """Group permissions by category for UI."""
    result: dict[str, list[PermissionDef]] = {}
    for perm in PERMISSION_REGISTRY.values():
        result.setdefault(perm.category.value, []).append(perm)
    return result
