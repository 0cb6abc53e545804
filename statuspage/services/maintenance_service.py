"""Maintenance service - scheduled maintenance windows."""

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from statuspage.core.errors import FieldValueError
from statuspage.db.models import Maintenance
from statuspage.schemas.maintenance import (
    WINDOW_ORDER_MESSAGE,
    MaintenanceCreate,
    MaintenanceUpdate,
)
from statuspage.services import service_service
from statuspage.utils.datetime_parsing import ensure_utc


class MaintenanceWindowError(FieldValueError):
    """Raised when an update would leave the window ending before it starts."""

    field = "scheduledEnd"

    def __init__(self):
        super().__init__(WINDOW_ORDER_MESSAGE)


def list_maintenance(db: Session, org_id: UUID) -> list[Maintenance]:
    """List an organization's maintenance windows, latest start first."""
    return (
        db.query(Maintenance)
        .options(selectinload(Maintenance.services))
        .filter(Maintenance.organization_id == org_id)
        .order_by(Maintenance.scheduled_start.desc())
        .all()
    )


def get_maintenance(db: Session, maintenance_id: UUID, org_id: UUID) -> Maintenance | None:
    """Get maintenance window by ID (org-scoped)."""
    return db.query(Maintenance).options(selectinload(Maintenance.services)).filter(
        Maintenance.id == maintenance_id,
        Maintenance.organization_id == org_id,
    ).first()


def create_maintenance(db: Session, org_id: UUID, data: MaintenanceCreate) -> Maintenance:
    """
    Schedule a maintenance window.

    The schema has already rejected end <= start.

    Raises:
        UnknownServicesError: If service_ids reference another organization
    """
    services = service_service.resolve_services(db, org_id, data.service_ids)
    maintenance = Maintenance(
        organization_id=org_id,
        title=data.title,
        description=data.description,
        scheduled_start=data.scheduled_start,
        scheduled_end=data.scheduled_end,
        status=data.status.value,
    )
    maintenance.services = services
    db.add(maintenance)
    db.commit()
    db.refresh(maintenance)
    return maintenance


def update_maintenance(
    db: Session, maintenance: Maintenance, data: MaintenanceUpdate
) -> Maintenance:
    """
    Update a maintenance window (partial).

    The resulting window is validated against the stored bounds before
    anything is written.

    Raises:
        MaintenanceWindowError: If the new window ends at or before its start
        UnknownServicesError: If service_ids reference another organization
    """
    update_data = data.model_dump(exclude_unset=True)

    start = update_data.get("scheduled_start") or maintenance.scheduled_start
    end = update_data.get("scheduled_end") or maintenance.scheduled_end
    if ensure_utc(end) <= ensure_utc(start):
        raise MaintenanceWindowError()

    services = None
    if update_data.get("service_ids") is not None:
        services = service_service.resolve_services(
            db, maintenance.organization_id, update_data["service_ids"]
        )

    if update_data.get("title") is not None:
        maintenance.title = update_data["title"]
    if "description" in update_data:
        maintenance.description = update_data["description"]
    if update_data.get("status") is not None:
        maintenance.status = update_data["status"].value
    maintenance.scheduled_start = start
    maintenance.scheduled_end = end
    if services is not None:
        maintenance.services = services

    db.commit()
    db.refresh(maintenance)
    return maintenance


def delete_maintenance(db: Session, maintenance: Maintenance) -> None:
    """Delete a maintenance window and its service associations."""
    db.delete(maintenance)
    db.commit()
