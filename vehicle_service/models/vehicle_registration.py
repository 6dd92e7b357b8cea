"""
Vehicle registration request document model.
"""
import enum

from vehicle_service.models.base import Document


class VehicleModel(str, enum.Enum):
    """Vehicle make enumeration."""
    TOYOTA = "Toyota"
    HONDA = "Honda"
    NISSAN = "Nissan"
    SUZUKI = "Suzuki"
    BMW = "BMW"
    BENZ = "Benz"
    OTHER = "other"


class RegistrationStatus(str, enum.Enum):
    """Registration status enumeration."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VehicleRegistration(Document):
    """Vehicle registration requests collection."""

    __collection__ = "vehicle_registrations"
    defaults = {
        "status": RegistrationStatus.PENDING.value,
        "requested_by": None,
    }
