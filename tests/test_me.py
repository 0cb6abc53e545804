"""Tests for GET /api/me."""

import pytest


@pytest.mark.asyncio
async def test_me_for_admin(admin_client):
    resp = await admin_client.get("/api/me")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["userId"] == "user_alice"
    assert data["role"] == "admin"
    assert data["externalOrganizationId"] == "org_acme"
    assert data["organizationId"]
    assert data["isSuperadmin"] is False
    assert "org:services:create" in data["permissions"]
    assert data["permissions"] == sorted(data["permissions"])


@pytest.mark.asyncio
async def test_me_for_member(member_client):
    data = (await member_client.get("/api/me")).json()
    assert data["role"] == "member"
    assert data["permissions"] == [
        "org:incidents:read",
        "org:maintenance:read",
        "org:services:read",
    ]


@pytest.mark.asyncio
async def test_me_without_org(client_for, token_factory):
    async with client_for(token_factory("user_dave")) as c:
        resp = await c.get("/api/me")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["organizationId"] is None
    assert data["externalOrganizationId"] is None


@pytest.mark.asyncio
async def test_me_for_superadmin(superadmin_client):
    data = (await superadmin_client.get("/api/me")).json()
    assert data["isSuperadmin"] is True
    assert data["role"] == "admin"
    assert "org:maintenance:delete" in data["permissions"]


@pytest.mark.asyncio
async def test_me_groups_granted_permissions(member_client, admin_client):
    member = (await member_client.get("/api/me")).json()
    assert member["permissionGroups"] == {
        "Services": [{"key": "org:services:read", "label": "View Services"}],
        "Incidents": [{"key": "org:incidents:read", "label": "View Incidents"}],
        "Maintenance": [{"key": "org:maintenance:read", "label": "View Maintenance"}],
    }

    admin = (await admin_client.get("/api/me")).json()
    assert {p["key"] for p in admin["permissionGroups"]["Organization"]} == {
        "org:settings:manage",
        "org:members:manage",
    }
