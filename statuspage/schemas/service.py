"""Pydantic schemas for services and their status history."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from statuspage.db.enums import ServiceStatus
from statuspage.schemas.common import CamelModel


class ServiceCreate(CamelModel):
    """Request to create a service."""
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: ServiceStatus = ServiceStatus.OPERATIONAL


class ServiceUpdate(CamelModel):
    """Request to update a service (partial)."""
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: ServiceStatus | None = None


class ServiceSummary(CamelModel):
    """Compact service embedded in incidents and maintenance windows."""
    id: UUID
    name: str
    status: ServiceStatus


class ServiceRead(CamelModel):
    """Full service response."""
    id: UUID
    organization_id: UUID
    name: str
    description: str | None
    status: ServiceStatus
    created_at: datetime
    updated_at: datetime


class StatusHistoryRead(CamelModel):
    id: UUID
    service_id: UUID
    status: ServiceStatus
    changed_by: str | None
    created_at: datetime
