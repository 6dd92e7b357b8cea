"""
Vehicle error report document model.
"""
import enum

from vehicle_service.models.base import Document


class ErrorSeverity(str, enum.Enum):
    """Severity enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorStatus(str, enum.Enum):
    """Error report status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class VehicleError(Document):
    """Vehicle error reports collection."""

    __collection__ = "vehicle_errors"
    defaults = {
        "severity": ErrorSeverity.MEDIUM.value,
        "status": ErrorStatus.PENDING.value,
        "resolved_by": None,
        "resolution_notes": "",
    }
