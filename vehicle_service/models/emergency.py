"""
Emergency request document model.
"""
import enum

from vehicle_service.models.base import Document


class VehicleType(str, enum.Enum):
    """Vehicle type enumeration."""
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    BUS = "bus"
    TRUCK = "truck"
    VAN = "van"
    OTHER = "other"


class EmergencyType(str, enum.Enum):
    """Emergency type enumeration."""
    BREAKDOWN = "breakdown"
    ACCIDENT = "accident"
    FLAT_TIRE = "flat_tire"
    OTHER = "other"


class EmergencyStatus(str, enum.Enum):
    """Emergency status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EmergencyRequest(Document):
    """Emergency requests collection."""

    __collection__ = "emergency_requests"
    defaults = {
        "photos": [],
        "status": EmergencyStatus.PENDING.value,
        "assigned_to": None,
        "vehicle_number": None,
    }
