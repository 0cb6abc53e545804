"""Pydantic schemas for scheduled maintenance windows."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator

from statuspage.db.enums import MaintenanceStatus
from statuspage.schemas.common import CamelModel
from statuspage.schemas.service import ServiceSummary
from statuspage.utils.datetime_parsing import ensure_utc

WINDOW_ORDER_MESSAGE = "scheduledEnd must be after scheduledStart"


class MaintenanceCreate(CamelModel):
    """Request to schedule a maintenance window."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    scheduled_start: datetime
    scheduled_end: datetime
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    service_ids: list[UUID] = Field(default_factory=list)

    @field_validator("scheduled_start")
    @classmethod
    def normalize_start(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("scheduled_end")
    @classmethod
    def validate_end_after_start(cls, v: datetime, info: ValidationInfo) -> datetime:
        v = ensure_utc(v)
        start = info.data.get("scheduled_start")
        if start is not None and v <= start:
            raise ValueError(WINDOW_ORDER_MESSAGE)
        return v


class MaintenanceUpdate(CamelModel):
    """Request to update a maintenance window (partial).

    When only one bound is sent it is checked against the stored other
    bound by the service layer.
    """
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None
    status: MaintenanceStatus | None = None
    service_ids: list[UUID] | None = None

    @field_validator("scheduled_start")
    @classmethod
    def normalize_start(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @field_validator("scheduled_end")
    @classmethod
    def validate_end_after_start(
        cls, v: datetime | None, info: ValidationInfo
    ) -> datetime | None:
        if v is None:
            return None
        v = ensure_utc(v)
        start = info.data.get("scheduled_start")
        if start is not None and v <= start:
            raise ValueError(WINDOW_ORDER_MESSAGE)
        return v


class MaintenanceSummary(CamelModel):
    """Compact maintenance window for organization overviews."""
    id: UUID
    title: str
    status: MaintenanceStatus
    scheduled_start: datetime
    scheduled_end: datetime


class MaintenanceRead(CamelModel):
    """Full maintenance response with affected services."""
    id: UUID
    organization_id: UUID
    title: str
    description: str | None
    scheduled_start: datetime
    scheduled_end: datetime
    status: MaintenanceStatus
    created_at: datetime
    updated_at: datetime
    services: list[ServiceSummary] = Field(default_factory=list)
