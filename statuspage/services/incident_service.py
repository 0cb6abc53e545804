"""Incident service - incidents, their timeline and affected services."""

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from statuspage.db.enums import IncidentImpact, IncidentStatus
from statuspage.db.models import Incident, IncidentUpdate
from statuspage.schemas.incident import IncidentCreate, IncidentUpdate as IncidentUpdateData
from statuspage.schemas.incident import IncidentUpdateCreate
from statuspage.services import service_service
from statuspage.utils.datetime_parsing import utc_now

CREATED_MESSAGE = "Incident created: {title}"
STATUS_CHANGED_MESSAGE = "Status updated to {status}"


def _apply_status(incident: Incident, status: IncidentStatus) -> bool:
    """
    Set the incident status. Returns True if it changed.

    ``resolved_at`` is stamped on the transition into RESOLVED and kept as
    is for every other transition, including moving back out of RESOLVED.
    """
    if incident.status == status.value:
        return False
    incident.status = status.value
    if status == IncidentStatus.RESOLVED:
        incident.resolved_at = utc_now()
    return True


def _with_relations(query):
    return query.options(
        selectinload(Incident.services),
        selectinload(Incident.updates),
    )


def list_incidents(db: Session, org_id: UUID) -> list[Incident]:
    """List an organization's incidents, newest first."""
    return (
        _with_relations(db.query(Incident))
        .filter(Incident.organization_id == org_id)
        .order_by(Incident.created_at.desc())
        .all()
    )


def get_incident(db: Session, incident_id: UUID, org_id: UUID) -> Incident | None:
    """Get incident by ID (org-scoped)."""
    return _with_relations(db.query(Incident)).filter(
        Incident.id == incident_id,
        Incident.organization_id == org_id,
    ).first()


def create_incident(db: Session, org_id: UUID, data: IncidentCreate) -> Incident:
    """
    Create an incident with its initial timeline entry.

    Raises:
        UnknownServicesError: If service_ids reference another organization
    """
    services = service_service.resolve_services(db, org_id, data.service_ids)

    incident = Incident(
        organization_id=org_id,
        title=data.title,
        description=data.description,
        status=data.status.value,
        impact=data.impact.value,
        resolved_at=utc_now() if data.status == IncidentStatus.RESOLVED else None,
    )
    incident.services = services
    db.add(incident)
    db.flush()

    db.add(
        IncidentUpdate(
            incident_id=incident.id,
            status=incident.status,
            message=CREATED_MESSAGE.format(title=incident.title),
        )
    )
    db.commit()
    db.refresh(incident)
    return incident


def update_incident(db: Session, incident: Incident, data: IncidentUpdateData) -> Incident:
    """
    Update incident fields (partial).

    A status change appends a synthetic timeline entry.

    Raises:
        UnknownServicesError: If service_ids reference another organization
    """
    update_data = data.model_dump(exclude_unset=True)

    if update_data.get("service_ids") is not None:
        incident.services = service_service.resolve_services(
            db, incident.organization_id, update_data["service_ids"]
        )

    if update_data.get("title") is not None:
        incident.title = update_data["title"]
    if "description" in update_data:
        incident.description = update_data["description"]
    if update_data.get("impact") is not None:
        incident.impact = IncidentImpact(update_data["impact"]).value

    status = update_data.get("status")
    if status is not None and _apply_status(incident, IncidentStatus(status)):
        db.add(
            IncidentUpdate(
                incident_id=incident.id,
                status=incident.status,
                message=STATUS_CHANGED_MESSAGE.format(status=incident.status),
            )
        )

    db.commit()
    db.refresh(incident)
    return incident


def add_update(db: Session, incident: Incident, data: IncidentUpdateCreate) -> IncidentUpdate:
    """
    Append a timeline update.

    If its status differs from the incident's, the incident follows it.
    """
    update = IncidentUpdate(
        incident_id=incident.id,
        status=data.status.value,
        message=data.message,
    )
    db.add(update)
    _apply_status(incident, data.status)
    db.commit()
    db.refresh(update)
    return update


def delete_incident(db: Session, incident: Incident) -> None:
    """Delete an incident; updates and associations go with it."""
    db.delete(incident)
    db.commit()
