"""Incidents router - API endpoints for incidents and their timeline."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from statuspage.core.deps import get_db, require_org_scope, require_permission
from statuspage.core.policies import get_policy
from statuspage.schemas.auth import UserSession
from statuspage.schemas.common import DeleteResponse
from statuspage.schemas.incident import (
    IncidentCreate,
    IncidentRead,
    IncidentUpdate,
    IncidentUpdateCreate,
    IncidentUpdateRead,
)
from statuspage.services import incident_service
from statuspage.utils.normalization import parse_uuid

policy = get_policy("incidents")

router = APIRouter()


@router.get("", response_model=list[IncidentRead])
def list_incidents(
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    """List incidents with affected services and updates, newest first."""
    if session.organization_id is None:
        return []
    return incident_service.list_incidents(db, session.organization_id)


@router.post("", response_model=IncidentRead, status_code=201)
def create_incident(
    data: IncidentCreate,
    session: UserSession = Depends(require_permission(policy.actions["create"])),
    db: Session = Depends(get_db),
):
    """Report an incident. An initial timeline update is added automatically."""
    org_id = require_org_scope(session)
    return incident_service.create_incident(db, org_id, data)


@router.get("/{incident_id}", response_model=IncidentRead)
def get_incident(
    incident_id: str,
    session: UserSession = Depends(require_permission(policy.default)),
    db: Session = Depends(get_db),
):
    return _get_or_404(db, incident_id, session)


@router.put("/{incident_id}", response_model=IncidentRead)
def update_incident(
    incident_id: str,
    data: IncidentUpdate,
    session: UserSession = Depends(require_permission(policy.actions["update"])),
    db: Session = Depends(get_db),
):
    """
    Update an incident.

    - Changing status appends "Status updated to <STATUS>" to the timeline
    - Moving to RESOLVED stamps resolvedAt; other moves leave it unchanged
    """
    require_org_scope(session)
    incident = _get_or_404(db, incident_id, session)
    return incident_service.update_incident(db, incident, data)


@router.post("/{incident_id}/updates", response_model=IncidentUpdateRead, status_code=201)
def add_incident_update(
    incident_id: str,
    data: IncidentUpdateCreate,
    session: UserSession = Depends(require_permission(policy.actions["update"])),
    db: Session = Depends(get_db),
):
    """Append a timeline update; the incident takes on its status."""
    require_org_scope(session)
    incident = _get_or_404(db, incident_id, session)
    return incident_service.add_update(db, incident, data)


@router.delete("/{incident_id}", response_model=DeleteResponse)
def delete_incident(
    incident_id: str,
    session: UserSession = Depends(require_permission(policy.actions["delete"])),
    db: Session = Depends(get_db),
):
    incident = _get_or_404(db, incident_id, session)
    incident_service.delete_incident(db, incident)
    return DeleteResponse()


def _get_or_404(db: Session, incident_id: str, session: UserSession):
    incident = None
    parsed_id = parse_uuid(incident_id)
    if parsed_id is not None and session.organization_id is not None:
        incident = incident_service.get_incident(db, parsed_id, session.organization_id)
    if not incident:
        raise HTTPException(status_code=404, detail="Incident not found")
    return incident
