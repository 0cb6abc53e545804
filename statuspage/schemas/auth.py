"""Authentication-related Pydantic schemas."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from statuspage.core.permissions import SUPERADMIN_PERMISSIONS
from statuspage.db.enums import Role
from statuspage.schemas.common import CamelModel


class StandardUser(BaseModel):
    """A user whose role comes from their organization membership."""
    kind: Literal["standard"] = "standard"
    user_id: str
    external_org_id: str | None = None
    role: Role = Role.MEMBER


class SuperAdmin(BaseModel):
    """
    The configured superuser.

    Always an admin, may act without an organization, and never needs a
    membership lookup to get its permissions.
    """
    kind: Literal["superadmin"] = "superadmin"
    user_id: str
    external_org_id: str | None = None

    @property
    def role(self) -> Role:
        return Role.ADMIN


Identity = StandardUser | SuperAdmin


class UserSession(BaseModel):
    """
    Full session context for authenticated requests.

    This is returned by get_current_session dependency
    and contains all information needed for authorization.
    ``organization_id`` is the local organization row and is None when the
    caller has no organization or it could not be synced.
    """
    identity: Identity = Field(discriminator="kind")
    organization_id: UUID | None = None
    permissions: frozenset[str] = frozenset()

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    @property
    def external_org_id(self) -> str | None:
        return self.identity.external_org_id

    @property
    def role(self) -> Role:
        return self.identity.role

    @property
    def is_superadmin(self) -> bool:
        return isinstance(self.identity, SuperAdmin)

    def has_permission(self, permission: str) -> bool:
        if self.is_superadmin:
            return permission in SUPERADMIN_PERMISSIONS
        return permission in self.permissions


class PermissionInfo(CamelModel):
    key: str
    label: str


class MeResponse(CamelModel):
    """Response schema for GET /api/me (UI gating hints)."""
    user_id: str
    organization_id: UUID | None
    external_organization_id: str | None
    role: Role
    permissions: list[str]
    permission_groups: dict[str, list[PermissionInfo]] = Field(default_factory=dict)
    is_superadmin: bool
