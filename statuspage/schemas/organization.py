"""Organization-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from statuspage.db.enums import ServiceStatus
from statuspage.schemas.common import CamelModel
from statuspage.schemas.incident import IncidentSummary
from statuspage.schemas.maintenance import MaintenanceSummary
from statuspage.schemas.service import ServiceRead


class OrganizationRead(CamelModel):
    """Response schema for reading an organization."""
    id: UUID
    external_id: str
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime


class OrganizationDetail(OrganizationRead):
    """Organization with everything it owns.

    ``overall_status`` is the most severe status across its services.
    """
    overall_status: ServiceStatus = ServiceStatus.OPERATIONAL
    services: list[ServiceRead] = Field(default_factory=list)
    incidents: list[IncidentSummary] = Field(default_factory=list)
    maintenances: list[MaintenanceSummary] = Field(default_factory=list)
