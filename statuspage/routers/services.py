"""Services router - API endpoints for monitored services."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from statuspage.core.deps import get_db, require_org_scope, require_permission
from statuspage.core.policies import get_policy
from statuspage.schemas.auth import UserSession
from statuspage.schemas.common import DeleteResponse
from statuspage.schemas.service import (
    ServiceCreate,
    ServiceRead,
    ServiceUpdate,
    StatusHistoryRead,
)
from statuspage.services import service_service
from statuspage.utils.normalization import parse_uuid

policy = get_policy("services")

router = APIRouter()


@router.get("", response_model=list[ServiceRead])
def list_services(
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    """List services. Callers without a synced organization get an empty list."""
    if session.organization_id is None:
        return []
    return service_service.list_services(db, session.organization_id)


@router.post("", response_model=ServiceRead, status_code=201)
def create_service(
    data: ServiceCreate,
    session: UserSession = Depends(require_permission(policy.actions["create"])),
    db: Session = Depends(get_db),
):
    """Create a service and record its initial status."""
    org_id = require_org_scope(session)
    return service_service.create_service(db, org_id, session.user_id, data)


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(
    service_id: str,
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    return _get_or_404(db, service_id, session)


@router.put("/{service_id}", response_model=ServiceRead)
def update_service(
    service_id: str,
    data: ServiceUpdate,
    session: UserSession = Depends(require_permission(policy.actions["update"])),
    db: Session = Depends(get_db),
):
    """Update a service; a status change is recorded in its history."""
    require_org_scope(session)
    service = _get_or_404(db, service_id, session)
    return service_service.update_service(db, service, data, session.user_id)


@router.delete("/{service_id}", response_model=DeleteResponse)
def delete_service(
    service_id: str,
    session: UserSession = Depends(require_permission(policy.actions["delete"])),
    db: Session = Depends(get_db),
):
    service = _get_or_404(db, service_id, session)
    service_service.delete_service(db, service)
    return DeleteResponse()


@router.get("/{service_id}/history", response_model=list[StatusHistoryRead])
def list_status_history(
    service_id: str,
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    """Status history for a service, newest first."""
    service = _get_or_404(db, service_id, session)
    return service_service.list_status_history(db, service)


def _get_or_404(db: Session, service_id: str, session: UserSession):
    service = None
    parsed_id = parse_uuid(service_id)
    if parsed_id is not None and session.organization_id is not None:
        service = service_service.get_service(db, parsed_id, session.organization_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service
