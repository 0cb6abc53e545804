"""Tests for lazy organization sync from the identity provider."""

import pytest
from sqlalchemy.exc import IntegrityError

from statuspage.db.models import Organization
from statuspage.services import auth_service, org_service
from statuspage.services.identity_provider import IdentityProviderError


def test_ensure_organization_creates_once(db, identity_provider):
    first = org_service.ensure_organization(db, identity_provider, "org_acme")
    second = org_service.ensure_organization(db, identity_provider, "org_acme")

    assert first.id == second.id
    assert first.name == "Acme Corp"
    assert first.slug == "acme"
    assert db.query(Organization).count() == 1
    assert identity_provider.calls.count(("get_organization", "org_acme")) == 1


def test_slug_derived_from_name_when_provider_has_none(db, identity_provider):
    org = org_service.ensure_organization(db, identity_provider, "org_globex")
    assert org.slug == "globex-inc"


def test_slug_collision_gets_suffix(db, identity_provider):
    identity_provider.add_organization("org_acme_eu", "Acme EU", "acme")

    acme = org_service.ensure_organization(db, identity_provider, "org_acme")
    acme_eu = org_service.ensure_organization(db, identity_provider, "org_acme_eu")

    assert acme.slug == "acme"
    assert acme_eu.slug != "acme"
    assert acme_eu.slug.startswith("acme-")


def test_concurrent_insert_reads_back_winner(db, identity_provider, monkeypatch):
    winner = org_service.ensure_organization(db, identity_provider, "org_acme")

    real_lookup = org_service.get_org_by_external_id
    lookups = []

    def lookup_missing_first(session, external_id):
        # The first lookup races and misses the row another request just wrote
        lookups.append(external_id)
        if len(lookups) == 1:
            return None
        return real_lookup(session, external_id)

    monkeypatch.setattr(org_service, "get_org_by_external_id", lookup_missing_first)

    org = org_service.ensure_organization(db, identity_provider, "org_acme")

    assert org.id == winner.id
    assert len(lookups) == 2
    assert db.query(Organization).count() == 1


def test_integrity_error_without_row_is_raised(db, identity_provider, monkeypatch):
    monkeypatch.setattr(org_service, "get_org_by_external_id", lambda session, external_id: None)
    org_service.ensure_organization(db, identity_provider, "org_acme")

    with pytest.raises(IntegrityError):
        org_service.ensure_organization(db, identity_provider, "org_acme")


def test_slug_taken_after_check_is_retried(db, identity_provider, monkeypatch):
    identity_provider.add_organization("org_acme_eu", "Acme EU", "acme")
    acme = org_service.ensure_organization(db, identity_provider, "org_acme")

    real_available_slug = org_service._available_slug
    attempts = []

    def stale_slug_first(session, base, external_id, full_suffix=False):
        # The first check runs before the other organization's insert lands
        attempts.append(full_suffix)
        if len(attempts) == 1:
            return base
        return real_available_slug(session, base, external_id, full_suffix=full_suffix)

    monkeypatch.setattr(org_service, "_available_slug", stale_slug_first)

    acme_eu = org_service.ensure_organization(db, identity_provider, "org_acme_eu")

    assert attempts == [False, True]
    assert acme_eu.id != acme.id
    assert acme_eu.slug != "acme"
    assert acme_eu.slug.startswith("acme-")
    assert db.query(Organization).count() == 2


def test_ensure_organization_propagates_provider_error(db, identity_provider):
    identity_provider.failing.add("get_organization")
    with pytest.raises(IdentityProviderError):
        org_service.ensure_organization(db, identity_provider, "org_acme")


def test_sync_failure_is_swallowed(db, identity_provider, caplog):
    identity_provider.failing.add("get_organization")

    with caplog.at_level("WARNING"):
        org_id = auth_service.sync_organization_id(db, identity_provider, "org_acme")

    assert org_id is None
    assert db.query(Organization).count() == 0
    assert any("Organization sync failed" in r.message for r in caplog.records)


def test_sync_without_external_id(db, identity_provider):
    assert auth_service.sync_organization_id(db, identity_provider, None) is None
    assert identity_provider.calls == []


@pytest.mark.asyncio
async def test_first_request_syncs_organization(admin_client, db):
    resp = await admin_client.get("/api/services")
    assert resp.status_code == 200, resp.text

    org = org_service.get_org_by_external_id(db, "org_acme")
    assert org is not None
    assert org.name == "Acme Corp"


@pytest.mark.asyncio
async def test_unsynced_org_reads_empty_and_refuses_writes(
    admin_client, identity_provider
):
    identity_provider.failing.add("get_organization")

    for path in ("/api/services", "/api/incidents", "/api/maintenance"):
        resp = await admin_client.get(path)
        assert resp.status_code == 200, resp.text
        assert resp.json() == []

    created = await admin_client.post("/api/services", json={"name": "API"})
    assert created.status_code == 403
    assert created.json()["detail"] == "Organization required"

    current = await admin_client.get("/api/organizations/current")
    assert current.status_code == 404

    missing = await admin_client.get("/api/services/00000000-0000-0000-0000-000000000001")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_sync_recovers_on_later_request(admin_client, identity_provider):
    identity_provider.failing.add("get_organization")
    resp = await admin_client.post("/api/services", json={"name": "API"})
    assert resp.status_code == 403

    identity_provider.failing.clear()
    resp = await admin_client.post("/api/services", json={"name": "API"})
    assert resp.status_code == 201, resp.text
