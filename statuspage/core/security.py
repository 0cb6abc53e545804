"""Session token verification for identity-provider issued JWTs."""

from dataclasses import dataclass

import jwt
from starlette.requests import HTTPConnection

from statuspage.core.config import Settings


@dataclass(frozen=True)
class SessionClaims:
    """The subset of session claims the API relies on."""

    user_id: str
    org_id: str | None
    org_role: str | None


def extract_session_token(connection: HTTPConnection, cookie_name: str) -> str | None:
    """Read the session token from a Bearer header or the session cookie."""
    authorization = connection.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return connection.cookies.get(cookie_name) or None


def decode_session_token(token: str, settings: Settings) -> SessionClaims:
    """
    Decode and verify a session JWT.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired or has no subject
    """
    payload = jwt.decode(
        token,
        settings.SESSION_JWT_KEY,
        algorithms=settings.session_jwt_algorithms_list,
        leeway=settings.SESSION_JWT_LEEWAY,
        options={"require": ["sub"]},
    )
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise jwt.InvalidTokenError("Session token has no subject")
    return SessionClaims(
        user_id=user_id,
        org_id=payload.get("org_id") or None,
        org_role=payload.get("org_role") or None,
    )
