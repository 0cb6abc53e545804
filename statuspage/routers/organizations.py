"""Organizations router - the caller's synced organization."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from statuspage.core.deps import get_db, require_org
from statuspage.schemas.auth import UserSession
from statuspage.schemas.organization import OrganizationDetail, OrganizationRead
from statuspage.services import org_service
from statuspage.utils.normalization import parse_uuid

router = APIRouter()


@router.get("/current", response_model=OrganizationRead)
def get_current_organization(
    session: UserSession = Depends(require_org),
    db: Session = Depends(get_db),
):
    """Return the organization the session is acting in."""
    org = None
    if session.organization_id is not None:
        org = org_service.get_org_by_id(db, session.organization_id)
    if not org:
        raise HTTPException(status_code=404, detail="No organization found")
    return org


@router.get("/{org_id}", response_model=OrganizationDetail)
def get_organization(
    org_id: str,
    session: UserSession = Depends(require_org),
    db: Session = Depends(get_db),
):
    """
    Return an organization with its services, incidents and maintenance.

    Only the caller's own organization is visible; any other id is a 404.
    """
    parsed_id = parse_uuid(org_id)
    if parsed_id is None or session.organization_id != parsed_id:
        raise HTTPException(status_code=404, detail="Organization not found")
    org = org_service.get_org_by_id(db, parsed_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")

    detail = OrganizationDetail.model_validate(org)
    detail.overall_status = org_service.overall_status(org)
    return detail
