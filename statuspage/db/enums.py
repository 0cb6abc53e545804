"""Centralized enums for database and API.

Values are stored as strings and sent over the wire unchanged.
"""

from enum import Enum


class ServiceStatus(str, Enum):
    """Operational status of a service, ordered by severity."""

    OPERATIONAL = "OPERATIONAL"
    DEGRADED = "DEGRADED"
    PARTIAL_OUTAGE = "PARTIAL_OUTAGE"
    MAJOR_OUTAGE = "MAJOR_OUTAGE"

    @property
    def severity(self) -> int:
        return _SERVICE_STATUS_ORDER.index(self)


_SERVICE_STATUS_ORDER = list(ServiceStatus)


class IncidentStatus(str, Enum):
    """
    Incident lifecycle.

    Logically ordered, but any status may follow any other.
    """

    INVESTIGATING = "INVESTIGATING"
    IDENTIFIED = "IDENTIFIED"
    MONITORING = "MONITORING"
    RESOLVED = "RESOLVED"


class IncidentImpact(str, Enum):
    """How badly an incident affects users."""

    NONE = "NONE"
    MINOR = "MINOR"
    MAJOR = "MAJOR"
    CRITICAL = "CRITICAL"


class MaintenanceStatus(str, Enum):
    """Lifecycle of a scheduled maintenance window."""

    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Role(str, Enum):
    """
    Organization roles.

    - ADMIN: full management of services, incidents and maintenance
    - MEMBER: read-only
    """

    ADMIN = "admin"
    MEMBER = "member"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
