"""FastAPI dependencies for authentication, authorization, and database access."""

import logging
from typing import Generator
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from statuspage.core.config import Settings
from statuspage.core.permissions import is_valid_permission
from statuspage.core.security import decode_session_token, extract_session_token
from statuspage.schemas.auth import UserSession
from statuspage.services import auth_service
from statuspage.services.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency.

    Sessions come from the factory the application was built with and
    are closed after the request.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> UserSession:
    """
    Get full session context: identity, role, permissions, local org.

    This is the PRIMARY auth dependency for most endpoints.

    Raises:
        HTTPException 401: Not authenticated
    """
    token = extract_session_token(request, settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        claims = decode_session_token(token, settings)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Unauthorized")

    session = auth_service.resolve_session(
        db, identity_provider, claims, settings.SUPERADMIN_USERNAME
    )
    request.state.user_id = session.user_id
    request.state.org_id = session.organization_id
    return session


def require_org(session: UserSession = Depends(get_current_session)) -> UserSession:
    """
    Require an active organization in the session.

    The superadmin may proceed without one.

    Raises:
        HTTPException 403: No organization selected
    """
    if not session.is_superadmin and not session.external_org_id:
        raise HTTPException(status_code=403, detail="Organization required")
    return session


def require_permission(permission: str):
    """
    Dependency factory for permission-based authorization.

    Usage:
        @router.post("", dependencies=[Depends(require_permission(P.SERVICES_CREATE))])
    """
    permission = getattr(permission, "value", permission)
    if not is_valid_permission(permission):
        raise ValueError(f"Unknown permission: {permission}")

    def dependency(session: UserSession = Depends(require_org)) -> UserSession:
        if not session.has_permission(permission):
            raise HTTPException(
                status_code=403,
                detail=f"Missing permission: {permission}",
            )
        return session

    return dependency


def require_org_scope(session: UserSession) -> UUID:
    """
    Get the local org_id for a write.

    Writes need a synced organization; without one the caller is refused
    rather than writing unscoped rows.

    Raises:
        HTTPException 403: No synced organization
    """
    if session.organization_id is None:
        raise HTTPException(status_code=403, detail="Organization required")
    return session.organization_id
