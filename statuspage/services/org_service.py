"""Organization service - lazy sync of identity-provider organizations."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from statuspage.db.enums import ServiceStatus
from statuspage.db.models import Organization
from statuspage.services.identity_provider import IdentityProvider
from statuspage.utils.normalization import slugify

logger = logging.getLogger(__name__)


def get_org_by_id(db: Session, org_id: UUID) -> Organization | None:
    """Get organization by ID."""
    return db.query(Organization).filter(Organization.id == org_id).first()


def get_org_by_external_id(db: Session, external_id: str) -> Organization | None:
    """Get organization by its identity-provider ID."""
    return db.query(Organization).filter(Organization.external_id == external_id).first()


def _available_slug(db: Session, base: str, external_id: str, full_suffix: bool = False) -> str:
    slug = base or slugify(external_id) or "organization"
    suffix = slugify(external_id) if full_suffix else slugify(external_id)[-8:]
    taken = db.query(Organization.id).filter(Organization.slug == slug).first()
    if taken:
        slug = f"{slug}-{suffix}"
    return slug


def ensure_organization(
    db: Session,
    identity_provider: IdentityProvider,
    external_id: str,
) -> Organization:
    """
    Find or create the local organization for an identity-provider org.

    The name and slug are fetched from the identity provider only on first
    sight. Two requests racing on the same new organization both end up
    with the same row: the loser's insert hits the unique constraint on
    external_id, is rolled back, and the winner's row is read back. A slug
    taken between the availability check and the insert is retried once
    with the full external id as suffix.

    Raises:
        IdentityProviderError: If the organization cannot be fetched
        IntegrityError: If the insert fails and no row exists afterwards
    """
    existing = get_org_by_external_id(db, external_id)
    if existing:
        return existing

    remote = identity_provider.get_organization(external_id)
    base_slug = remote.slug or slugify(remote.name)
    for attempt in range(2):
        slug = _available_slug(db, base_slug, external_id, full_suffix=attempt > 0)
        org = Organization(external_id=external_id, name=remote.name, slug=slug)
        db.add(org)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            existing = get_org_by_external_id(db, external_id)
            if existing:
                return existing
            if attempt:
                raise
            # Another organization took the slug between the check and the insert
            logger.info("Slug %s taken, retrying external_id=%s", slug, external_id)
            continue

        db.refresh(org)
        logger.info("Synced organization external_id=%s org_id=%s", external_id, org.id)
        return org


def overall_status(org: Organization) -> ServiceStatus:
    """Most severe status across the organization's services."""
    statuses = [ServiceStatus(s.status) for s in org.services]
    if not statuses:
        return ServiceStatus.OPERATIONAL
    return max(statuses, key=lambda s: s.severity)
