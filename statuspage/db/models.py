"""SQLAlchemy ORM models.

Every domain table carries ``organization_id`` (directly or through its
parent) and must be scoped by it in all queries.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from statuspage.db.base import Base
from statuspage.db.enums import (
    IncidentImpact,
    IncidentStatus,
    MaintenanceStatus,
    ServiceStatus,
)
from statuspage.utils.datetime_parsing import utc_now


# =============================================================================
# Association tables (composite primary keys prevent duplicate pairs)
# =============================================================================

service_incidents = Table(
    "service_incidents",
    Base.metadata,
    Column(
        "service_id",
        Uuid,
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "incident_id",
        Uuid,
        ForeignKey("incidents.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

service_maintenance = Table(
    "service_maintenance",
    Base.metadata,
    Column(
        "service_id",
        Uuid,
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "maintenance_id",
        Uuid,
        ForeignKey("maintenance_windows.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Organization(Base):
    """
    A tenant mirrored from the identity provider.

    Created lazily the first time a request references an unseen
    ``external_id``; never deleted by the API.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now, nullable=False)

    services: Mapped[list["Service"]] = relationship(
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="Service.created_at.desc()",
    )
    incidents: Mapped[list["Incident"]] = relationship(
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="Incident.created_at.desc()",
    )
    maintenances: Mapped[list["Maintenance"]] = relationship(
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="Maintenance.scheduled_start.desc()",
    )


class Service(Base):
    """A monitored unit whose status is tracked and historized."""

    __tablename__ = "services"
    __table_args__ = (
        Index("idx_services_org_created", "organization_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), default=ServiceStatus.OPERATIONAL.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now, nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="services")
    status_history: Mapped[list["StatusHistory"]] = relationship(
        back_populates="service",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="StatusHistory.created_at.desc()",
    )
    incidents: Mapped[list["Incident"]] = relationship(
        secondary=service_incidents, back_populates="services"
    )
    maintenances: Mapped[list["Maintenance"]] = relationship(
        secondary=service_maintenance, back_populates="services"
    )


class StatusHistory(Base):
    """Append-only record of every status a service has been set to."""

    __tablename__ = "status_history"
    __table_args__ = (
        Index("idx_status_history_service_created", "service_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    # Identity-provider user id of the actor
    changed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    service: Mapped["Service"] = relationship(back_populates="status_history")


class Incident(Base):
    """
    A reported disruption.

    ``resolved_at`` is stamped when the status moves to RESOLVED and left
    untouched on every other change.
    """

    __tablename__ = "incidents"
    __table_args__ = (
        Index("idx_incidents_org_created", "organization_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), default=IncidentStatus.INVESTIGATING.value, nullable=False
    )
    impact: Mapped[str] = mapped_column(
        String(32), default=IncidentImpact.MAJOR.value, nullable=False
    )
    resolved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now, nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="incidents")
    services: Mapped[list["Service"]] = relationship(
        secondary=service_incidents,
        back_populates="incidents",
        order_by="Service.name",
    )
    updates: Mapped[list["IncidentUpdate"]] = relationship(
        back_populates="incident",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="IncidentUpdate.created_at.desc()",
    )


class IncidentUpdate(Base):
    """Append-only status snapshot and message on an incident timeline."""

    __tablename__ = "incident_updates"
    __table_args__ = (
        Index("idx_incident_updates_incident_created", "incident_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    incident_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("incidents.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    incident: Mapped["Incident"] = relationship(back_populates="updates")


class Maintenance(Base):
    """A scheduled window of planned impact. End is always after start."""

    __tablename__ = "maintenance_windows"
    __table_args__ = (
        Index("idx_maintenance_org_start", "organization_id", "scheduled_start"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    scheduled_start: Mapped[datetime] = mapped_column(nullable=False)
    scheduled_end: Mapped[datetime] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(32), default=MaintenanceStatus.SCHEDULED.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now, nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="maintenances")
    services: Mapped[list["Service"]] = relationship(
        secondary=service_maintenance,
        back_populates="maintenances",
        order_by="Service.name",
    )
