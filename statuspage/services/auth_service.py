"""Auth service - turns verified session claims into a UserSession.

Flow per request:
1. Decide whether the caller is the configured superadmin.
2. Work out the active organization and role.
3. Map the role to a permission set.
4. Lazily sync the organization into the local database.

Identity-provider failures in steps 1-2 and sync failures in step 4 are
logged and swallowed; they never fail the request on their own.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from statuspage.core.permissions import (
    SUPERADMIN_PERMISSIONS,
    get_role_default_permissions,
    normalize_role,
)
from statuspage.core.security import SessionClaims
from statuspage.core.structured_logging import build_log_context
from statuspage.db.enums import Role
from statuspage.schemas.auth import Identity, StandardUser, SuperAdmin, UserSession
from statuspage.services import org_service
from statuspage.services.identity_provider import IdentityProvider, IdentityProviderError

logger = logging.getLogger(__name__)


def _is_superadmin(
    identity_provider: IdentityProvider, user_id: str, superadmin_username: str
) -> bool:
    if not superadmin_username:
        return False
    try:
        user = identity_provider.get_user(user_id)
    except IdentityProviderError as exc:
        logger.warning(
            "User lookup failed, treating as standard user: %s",
            exc,
            extra=build_log_context(user_id=user_id),
        )
        return False
    return user.username == superadmin_username


def _first_membership_org(identity_provider: IdentityProvider, user_id: str) -> str | None:
    try:
        memberships = identity_provider.list_user_memberships(user_id)
    except IdentityProviderError as exc:
        logger.warning(
            "Membership lookup failed: %s", exc, extra=build_log_context(user_id=user_id)
        )
        return None
    return memberships[0].organization_id if memberships else None


def _membership_role(
    identity_provider: IdentityProvider, user_id: str, external_org_id: str
) -> str | None:
    try:
        memberships = identity_provider.list_user_memberships(user_id)
    except IdentityProviderError as exc:
        logger.warning(
            "Membership lookup failed: %s", exc, extra=build_log_context(user_id=user_id)
        )
        return None
    for membership in memberships:
        if membership.organization_id == external_org_id:
            return membership.role
    return None


def resolve_identity(
    identity_provider: IdentityProvider,
    claims: SessionClaims,
    superadmin_username: str,
) -> tuple[Identity, frozenset[str]]:
    """Resolve the caller's identity variant and permission set."""
    if _is_superadmin(identity_provider, claims.user_id, superadmin_username):
        external_org_id = claims.org_id or _first_membership_org(
            identity_provider, claims.user_id
        )
        identity = SuperAdmin(user_id=claims.user_id, external_org_id=external_org_id)
        return identity, SUPERADMIN_PERMISSIONS

    raw_role = claims.org_role
    if claims.org_id and not raw_role:
        raw_role = _membership_role(identity_provider, claims.user_id, claims.org_id)

    role_name = normalize_role(raw_role)
    # Unknown roles (and the viewer alias) are members
    role = Role(role_name) if Role.has_value(role_name) else Role.MEMBER
    identity = StandardUser(
        user_id=claims.user_id,
        external_org_id=claims.org_id,
        role=role,
    )
    return identity, get_role_default_permissions(role_name)


def sync_organization_id(
    db: Session,
    identity_provider: IdentityProvider,
    external_org_id: str | None,
) -> UUID | None:
    """Local organization id for the external id, or None if it can't be synced."""
    if not external_org_id:
        return None
    try:
        org = org_service.ensure_organization(db, identity_provider, external_org_id)
    except Exception:
        db.rollback()
        logger.warning(
            "Organization sync failed external_id=%s", external_org_id, exc_info=True
        )
        return None
    return org.id


def resolve_session(
    db: Session,
    identity_provider: IdentityProvider,
    claims: SessionClaims,
    superadmin_username: str,
) -> UserSession:
    """Build the full session context for a verified token."""
    identity, permissions = resolve_identity(identity_provider, claims, superadmin_username)
    organization_id = sync_organization_id(db, identity_provider, identity.external_org_id)
    return UserSession(
        identity=identity,
        organization_id=organization_id,
        permissions=permissions,
    )
