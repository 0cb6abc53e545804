"""Centralized RBAC policies for API resources."""

from dataclasses import dataclass

from statuspage.core.permissions import PermissionKey as P


@dataclass(frozen=True)
class ResourcePolicy:
    """Default permission + per-action overrides for a resource."""

    default: P
    actions: dict[str, P]


POLICIES: dict[str, ResourcePolicy] = {
    "services": ResourcePolicy(
        default=P.SERVICES_READ,
        actions={
            "create": P.SERVICES_CREATE,
            "update": P.SERVICES_UPDATE,
            "delete": P.SERVICES_DELETE,
        },
    ),
    "incidents": ResourcePolicy(
        default=P.INCIDENTS_READ,
        actions={
            "create": P.INCIDENTS_CREATE,
            "update": P.INCIDENTS_UPDATE,
            "delete": P.INCIDENTS_DELETE,
        },
    ),
    "maintenance": ResourcePolicy(
        default=P.MAINTENANCE_READ,
        actions={
            "create": P.MAINTENANCE_CREATE,
            "update": P.MAINTENANCE_UPDATE,
            "delete": P.MAINTENANCE_DELETE,
        },
    ),
}


def get_policy(resource: str) -> ResourcePolicy:
    """Fetch a resource policy or raise KeyError."""
    return POLICIES[resource]
