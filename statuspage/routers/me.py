"""Current-user router - role and permission hints for the web client."""

from fastapi import APIRouter, Depends

from statuspage.core.deps import get_current_session
from statuspage.core.permissions import get_permissions_by_category
from statuspage.schemas.auth import MeResponse, PermissionInfo, UserSession

router = APIRouter()


def _permission_groups(granted: frozenset[str]) -> dict[str, list[PermissionInfo]]:
    groups: dict[str, list[PermissionInfo]] = {}
    for category, perms in get_permissions_by_category().items():
        allowed = [
            PermissionInfo(key=perm.key.value, label=perm.label)
            for perm in perms
            if perm.key.value in granted
        ]
        if allowed:
            groups[category] = allowed
    return groups


@router.get("", response_model=MeResponse)
def get_me(session: UserSession = Depends(get_current_session)):
    """
    Describe the caller.

    The web client may use this to hide controls; enforcement happens on
    every endpoint regardless. ``permissionGroups`` groups the granted
    permissions by category for settings screens.
    """
    return MeResponse(
        user_id=session.user_id,
        organization_id=session.organization_id,
        external_organization_id=session.external_org_id,
        role=session.role,
        permissions=sorted(session.permissions),
        permission_groups=_permission_groups(session.permissions),
        is_superadmin=session.is_superadmin,
    )
