"""Maintenance router - API endpoints for scheduled maintenance windows."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from statuspage.core.deps import get_db, require_org_scope, require_permission
from statuspage.core.policies import get_policy
from statuspage.schemas.auth import UserSession
from statuspage.schemas.common import DeleteResponse
from statuspage.schemas.maintenance import (
    MaintenanceCreate,
    MaintenanceRead,
    MaintenanceUpdate,
)
from statuspage.services import maintenance_service
from statuspage.utils.normalization import parse_uuid

policy = get_policy("maintenance")

router = APIRouter()


@router.get("", response_model=list[MaintenanceRead])
def list_maintenance(
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    """List maintenance windows, latest scheduled start first."""
    if session.organization_id is None:
        return []
    return maintenance_service.list_maintenance(db, session.organization_id)


@router.post("", response_model=MaintenanceRead, status_code=201)
def create_maintenance(
    data: MaintenanceCreate,
    session: UserSession = Depends(require_permission(policy.actions["create"])),
    db: Session = Depends(get_db),
):
    """Schedule a maintenance window (scheduledEnd must be after scheduledStart)."""
    org_id = require_org_scope(session)
    return maintenance_service.create_maintenance(db, org_id, data)


@router.get("/{maintenance_id}", response_model=MaintenanceRead)
def get_maintenance(
    maintenance_id: str,
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    return _get_or_404(db, maintenance_id, session)


@router.put("/{maintenance_id}", response_model=MaintenanceRead)
def update_maintenance(
    maintenance_id: str,
    data: MaintenanceUpdate,
    session: UserSession = Depends(require_permission(policy.actions["update"])),
    db: Session = Depends(get_db),
):
    require_org_scope(session)
    maintenance = _get_or_404(db, maintenance_id, session)
    return maintenance_service.update_maintenance(db, maintenance, data)


@router.delete("/{maintenance_id}", response_model=DeleteResponse)
def delete_maintenance(
    maintenance_id: str,
    session: UserSession = Depends(require_permission(policy.actions["delete"])),
    db: Session = Depends(get_db),
):
    maintenance = _get_or_404(db, maintenance_id, session)
    maintenance_service.delete_maintenance(db, maintenance)
    return DeleteResponse()


def _get_or_404(db: Session, maintenance_id: str, session: UserSession):
    maintenance = None
    parsed_id = parse_uuid(maintenance_id)
    if parsed_id is not None and session.organization_id is not None:
        maintenance = maintenance_service.get_maintenance(
            db, parsed_id, session.organization_id
        )
    if not maintenance:
        raise HTTPException(status_code=404, detail="Maintenance not found")
    return maintenance
