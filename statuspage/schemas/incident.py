"""Pydantic schemas for incidents and their timeline updates."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from statuspage.db.enums import IncidentImpact, IncidentStatus
from statuspage.schemas.common import CamelModel
from statuspage.schemas.service import ServiceSummary


class IncidentCreate(CamelModel):
    """Request to report an incident."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: IncidentStatus = IncidentStatus.INVESTIGATING
    impact: IncidentImpact = IncidentImpact.MAJOR
    service_ids: list[UUID] = Field(default_factory=list)


class IncidentUpdate(CamelModel):
    """Request to update an incident (partial).

    ``service_ids`` replaces the affected-service set when provided.
    """
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: IncidentStatus | None = None
    impact: IncidentImpact | None = None
    service_ids: list[UUID] | None = None


class IncidentUpdateCreate(CamelModel):
    """Request to append a timeline update."""
    status: IncidentStatus
    message: str = Field(..., min_length=1, max_length=5000)


class IncidentUpdateRead(CamelModel):
    id: UUID
    incident_id: UUID
    status: IncidentStatus
    message: str
    created_at: datetime


class IncidentSummary(CamelModel):
    """Compact incident for organization overviews."""
    id: UUID
    title: str
    status: IncidentStatus
    impact: IncidentImpact
    resolved_at: datetime | None
    created_at: datetime


class IncidentRead(CamelModel):
    """Full incident response with affected services and timeline (newest first)."""
    id: UUID
    organization_id: UUID
    title: str
    description: str | None
    status: IncidentStatus
    impact: IncidentImpact
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime
    services: list[ServiceSummary] = Field(default_factory=list)
    updates: list[IncidentUpdateRead] = Field(default_factory=list)
