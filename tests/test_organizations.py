"""Tests for organization endpoints."""

import pytest

from statuspage.db.enums import ServiceStatus
from statuspage.db.models import Organization, Service
from statuspage.services import org_service


@pytest.mark.asyncio
async def test_current_organization(admin_client):
    resp = await admin_client.get("/api/organizations/current")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["externalId"] == "org_acme"
    assert data["name"] == "Acme Corp"
    assert data["slug"] == "acme"


@pytest.mark.asyncio
async def test_current_organization_requires_org(client_for, token_factory):
    async with client_for(token_factory("user_dave")) as c:
        resp = await c.get("/api/organizations/current")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_organization_detail(admin_client):
    await admin_client.post("/api/services", json={"name": "API"})
    await admin_client.post("/api/services", json={"name": "Web", "status": "PARTIAL_OUTAGE"})
    await admin_client.post("/api/incidents", json={"title": "Web outage"})
    await admin_client.post(
        "/api/maintenance",
        json={
            "title": "Upgrade",
            "scheduledStart": "2026-11-01T02:00:00Z",
            "scheduledEnd": "2026-11-01T03:00:00Z",
        },
    )
    org = (await admin_client.get("/api/organizations/current")).json()

    resp = await admin_client.get(f"/api/organizations/{org['id']}")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["overallStatus"] == "PARTIAL_OUTAGE"
    assert [s["name"] for s in data["services"]] == ["Web", "API"]
    assert [i["title"] for i in data["incidents"]] == ["Web outage"]
    assert [m["title"] for m in data["maintenances"]] == ["Upgrade"]


@pytest.mark.asyncio
async def test_other_organization_is_404(admin_client, globex_client):
    globex = (await globex_client.get("/api/organizations/current")).json()

    resp = await admin_client.get(f"/api/organizations/{globex['id']}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Organization not found"


def test_overall_status_is_most_severe():
    org = Organization(external_id="org_x", name="X", slug="x")
    assert org_service.overall_status(org) == ServiceStatus.OPERATIONAL

    org.services = [
        Service(name="a", status=ServiceStatus.DEGRADED.value),
        Service(name="b", status=ServiceStatus.MAJOR_OUTAGE.value),
        Service(name="c", status=ServiceStatus.OPERATIONAL.value),
    ]
    assert org_service.overall_status(org) == ServiceStatus.MAJOR_OUTAGE


@pytest.mark.asyncio
async def test_malformed_organization_id_is_404(admin_client):
    resp = await admin_client.get("/api/organizations/abc")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Organization not found"
