"""
Test configuration and fixtures.

Provides:
- An application built by create_app against in-memory SQLite
- A fake identity provider seeded with two organizations and their users
- Session token minting (HS256) for authenticated tests
- HTTPX AsyncClients for each kind of caller
"""
import os
import time
from typing import AsyncGenerator, Generator

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite://")

from statuspage.core.config import Settings
from statuspage.db.base import Base
from statuspage.main import create_app
from statuspage.services.identity_provider import (
    IdentityProviderError,
    IdpMembership,
    IdpOrganization,
    IdpUser,
)


TEST_JWT_SECRET = "test-session-secret"

ACME = "org_acme"
GLOBEX = "org_globex"

ADMIN_USER = "user_alice"
MEMBER_USER = "user_bob"
VIEWER_USER = "user_vera"
GLOBEX_ADMIN_USER = "user_carol"
SUPERADMIN_USER = "user_root"
LONER_USER = "user_dave"


# =============================================================================
# Identity provider
# =============================================================================

class FakeIdentityProvider:
    """In-process identity provider. Add method names to ``failing`` to make them raise."""

    def __init__(self):
        self.users: dict[str, str | None] = {}
        self.organizations: dict[str, IdpOrganization] = {}
        self.memberships: dict[str, list[IdpMembership]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def add_organization(self, org_id: str, name: str, slug: str | None = None) -> None:
        self.organizations[org_id] = IdpOrganization(id=org_id, name=name, slug=slug)

    def add_user(self, user_id: str, username: str | None = None, memberships=()) -> None:
        self.users[user_id] = username
        self.memberships[user_id] = [
            IdpMembership(organization_id=org_id, role=role) for org_id, role in memberships
        ]

    def _call(self, method: str, key: str) -> None:
        self.calls.append((method, key))
        if method in self.failing:
            raise IdentityProviderError(f"{method} unavailable", status_code=503)

    def get_user(self, user_id: str) -> IdpUser:
        self._call("get_user", user_id)
        if user_id not in self.users:
            raise IdentityProviderError(f"User {user_id} not found", status_code=404)
        return IdpUser(id=user_id, username=self.users[user_id])

    def get_organization(self, org_id: str) -> IdpOrganization:
        self._call("get_organization", org_id)
        if org_id not in self.organizations:
            raise IdentityProviderError(f"Organization {org_id} not found", status_code=404)
        return self.organizations[org_id]

    def list_user_memberships(self, user_id: str) -> list[IdpMembership]:
        self._call("list_user_memberships", user_id)
        return list(self.memberships.get(user_id, []))


@pytest.fixture(scope="function")
def identity_provider() -> FakeIdentityProvider:
    idp = FakeIdentityProvider()
    idp.add_organization(ACME, "Acme Corp", "acme")
    idp.add_organization(GLOBEX, "Globex Inc")
    idp.add_user(ADMIN_USER, "alice", [(ACME, "org:admin")])
    idp.add_user(MEMBER_USER, "bob", [(ACME, "org:member")])
    idp.add_user(VIEWER_USER, "vera", [(ACME, "org:viewer")])
    idp.add_user(GLOBEX_ADMIN_USER, "carol", [(GLOBEX, "org:admin")])
    idp.add_user(SUPERADMIN_USER, "admin123")
    idp.add_user(LONER_USER, "dave")
    return idp


# =============================================================================
# Application and database
# =============================================================================

@pytest.fixture(scope="function")
def settings() -> Settings:
    return Settings(
        ENV="test",
        DATABASE_URL="sqlite://",
        SESSION_JWT_KEY=TEST_JWT_SECRET,
        SESSION_JWT_ALGORITHMS="HS256",
        SUPERADMIN_USERNAME="admin123",
        RATE_LIMIT_API=0,
        SENTRY_DSN="",
    )


@pytest.fixture(scope="function")
def app(settings: Settings, identity_provider: FakeIdentityProvider):
    application = create_app(settings=settings, identity_provider=identity_provider)
    Base.metadata.create_all(application.state.engine)
    yield application
    application.state.engine.dispose()


@pytest.fixture(scope="function")
def db(app) -> Generator[Session, None, None]:
    """A session on the same in-memory database the app uses."""
    session = app.state.session_factory()
    yield session
    session.close()


# =============================================================================
# Auth helpers
# =============================================================================

def make_token(
    user_id: str,
    org_id: str | None = None,
    org_role: str | None = None,
    secret: str = TEST_JWT_SECRET,
    **extra,
) -> str:
    """Mint a session token shaped like the identity provider's."""
    now = int(time.time())
    payload = {"sub": user_id, "iat": now, "exp": now + 3600, **extra}
    if org_id:
        payload["org_id"] = org_id
    if org_role:
        payload["org_role"] = org_role
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _client(app, token: str | None = None) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=auth_headers(token) if token else None,
    )


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client."""
    async with _client(app) as c:
        yield c


@pytest.fixture(scope="function")
async def admin_client(app) -> AsyncGenerator[AsyncClient, None]:
    async with _client(app, make_token(ADMIN_USER, ACME, "org:admin")) as c:
        yield c


@pytest.fixture(scope="function")
async def member_client(app) -> AsyncGenerator[AsyncClient, None]:
    async with _client(app, make_token(MEMBER_USER, ACME, "org:member")) as c:
        yield c


@pytest.fixture(scope="function")
async def globex_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Admin of a different organization."""
    async with _client(app, make_token(GLOBEX_ADMIN_USER, GLOBEX, "org:admin")) as c:
        yield c


@pytest.fixture(scope="function")
async def superadmin_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Superadmin acting in Acme while carrying only a member role claim."""
    async with _client(app, make_token(SUPERADMIN_USER, ACME, "org:member")) as c:
        yield c


@pytest.fixture(scope="function")
def client_for(app):
    """Build a client for an arbitrary token; use as ``async with client_for(token)``."""
    def factory(token: str | None = None) -> AsyncClient:
        return _client(app, token)

    return factory


@pytest.fixture(scope="function")
def token_factory():
    """Expose make_token to tests."""
    return make_token
