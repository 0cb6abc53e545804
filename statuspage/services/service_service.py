"""Service service - business logic for monitored services and status history."""

from uuid import UUID

from sqlalchemy.orm import Session

from statuspage.core.errors import FieldValueError
from statuspage.db.enums import ServiceStatus
from statuspage.db.models import Service, StatusHistory
from statuspage.schemas.service import ServiceCreate, ServiceUpdate


class UnknownServicesError(FieldValueError):
    """Raised when associated service ids are not in the caller's organization."""

    field = "serviceIds"

    def __init__(self, missing: list[UUID]):
        self.missing = missing
        super().__init__(
            "Unknown service id(s): " + ", ".join(str(service_id) for service_id in missing)
        )


def list_services(db: Session, org_id: UUID) -> list[Service]:
    """List an organization's services, newest first."""
    return (
        db.query(Service)
        .filter(Service.organization_id == org_id)
        .order_by(Service.created_at.desc())
        .all()
    )


def get_service(db: Session, service_id: UUID, org_id: UUID) -> Service | None:
    """Get service by ID (org-scoped)."""
    return db.query(Service).filter(
        Service.id == service_id,
        Service.organization_id == org_id,
    ).first()


def resolve_services(db: Session, org_id: UUID, service_ids: list[UUID]) -> list[Service]:
    """
    Load services for an association list.

    Duplicates collapse; ids from other organizations count as unknown.

    Raises:
        UnknownServicesError: If any id does not belong to the organization
    """
    wanted = list(dict.fromkeys(service_ids))
    if not wanted:
        return []
    found = (
        db.query(Service)
        .filter(Service.organization_id == org_id, Service.id.in_(wanted))
        .all()
    )
    by_id = {service.id: service for service in found}
    missing = [service_id for service_id in wanted if service_id not in by_id]
    if missing:
        raise UnknownServicesError(missing)
    return [by_id[service_id] for service_id in wanted]


def _record_status(db: Session, service: Service, user_id: str | None) -> None:
    db.add(
        StatusHistory(
            service_id=service.id,
            status=service.status,
            changed_by=user_id,
        )
    )


def create_service(
    db: Session,
    org_id: UUID,
    user_id: str,
    data: ServiceCreate,
) -> Service:
    """Create a service and its initial status history entry."""
    service = Service(
        organization_id=org_id,
        name=data.name,
        description=data.description,
        status=data.status.value,
    )
    db.add(service)
    db.flush()
    _record_status(db, service, user_id)
    db.commit()
    db.refresh(service)
    return service


def update_service(
    db: Session,
    service: Service,
    data: ServiceUpdate,
    user_id: str,
) -> Service:
    """
    Update service fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    A history entry is appended only when the status actually changes.
    """
    update_data = data.model_dump(exclude_unset=True)
    previous_status = service.status

    clearable_fields = {"description"}
    for field, value in update_data.items():
        if value is None and field not in clearable_fields:
            continue
        if isinstance(value, ServiceStatus):
            value = value.value
        setattr(service, field, value)

    if service.status != previous_status:
        _record_status(db, service, user_id)

    db.commit()
    db.refresh(service)
    return service


def delete_service(db: Session, service: Service) -> None:
    """Delete a service; history and associations go with it."""
    db.delete(service)
    db.commit()


def list_status_history(db: Session, service: Service) -> list[StatusHistory]:
    """Status history for a service, newest first."""
    return (
        db.query(StatusHistory)
        .filter(StatusHistory.service_id == service.id)
        .order_by(StatusHistory.created_at.desc())
        .all()
    )
