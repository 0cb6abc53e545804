"""Identity provider client (Clerk Backend API).

Users, organizations and memberships live in the identity provider; the
API only reads them. Calls are made once with no retries; every failure is
raised as IdentityProviderError so callers can decide whether to swallow it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the identity provider cannot be reached or rejects a call."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class IdpUser:
    id: str
    username: str | None


@dataclass(frozen=True)
class IdpOrganization:
    id: str
    name: str
    slug: str | None


@dataclass(frozen=True)
class IdpMembership:
    organization_id: str
    role: str | None


class IdentityProvider(Protocol):
    """What the API needs from an identity provider."""

    def get_user(self, user_id: str) -> IdpUser: ...

    def get_organization(self, org_id: str) -> IdpOrganization: ...

    def list_user_memberships(self, user_id: str) -> list[IdpMembership]: ...


class ClerkClient:
    """Synchronous Clerk Backend API client sharing one connection pool."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.clerk.com/v1",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Identity provider request failed path=%s error=%s", path, exc)
            raise IdentityProviderError(f"Request to {path} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "Identity provider error path=%s status=%s body=%s",
                path,
                response.status_code,
                response.text[:300],
            )
            raise IdentityProviderError(
                f"Identity provider returned {response.status_code} for {path}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise IdentityProviderError(f"Invalid JSON from {path}") from exc

    def get_user(self, user_id: str) -> IdpUser:
        payload = self._get(f"/users/{user_id}")
        try:
            return IdpUser(id=payload["id"], username=payload.get("username"))
        except (KeyError, TypeError, AttributeError) as exc:
            raise IdentityProviderError(f"Malformed user payload for {user_id}") from exc

    def get_organization(self, org_id: str) -> IdpOrganization:
        payload = self._get(f"/organizations/{org_id}")
        try:
            return IdpOrganization(
                id=payload["id"],
                name=payload["name"],
                slug=payload.get("slug"),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise IdentityProviderError(f"Malformed organization payload for {org_id}") from exc

    def list_user_memberships(self, user_id: str) -> list[IdpMembership]:
        payload = self._get(f"/users/{user_id}/organization_memberships", params={"limit": 100})
        # Newer API versions wrap results in {"data": [...], "total_count": n}
        items = (payload.get("data") or []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise IdentityProviderError(f"Malformed membership payload for {user_id}")

        memberships: list[IdpMembership] = []
        for item in items:
            organization = item.get("organization") if isinstance(item, dict) else None
            if not isinstance(organization, dict) or not organization.get("id"):
                continue
            memberships.append(
                IdpMembership(organization_id=organization["id"], role=item.get("role"))
            )
        return memberships
