"""
Document models: collection names and enumerated field values.
"""
from vehicle_service.models.user import User, UserRole
from vehicle_service.models.emergency import (
    EmergencyRequest, EmergencyStatus, EmergencyType, VehicleType,
)
from vehicle_service.models.inventory import InventoryCategory, InventoryItem
from vehicle_service.models.vehicle_registration import (
    RegistrationStatus, VehicleModel, VehicleRegistration,
)
from vehicle_service.models.vehicle_error import ErrorSeverity, ErrorStatus, VehicleError

__all__ = [
    "User", "UserRole",
    "EmergencyRequest", "EmergencyStatus", "EmergencyType", "VehicleType",
    "InventoryItem", "InventoryCategory",
    "VehicleRegistration", "RegistrationStatus", "VehicleModel",
    "VehicleError", "ErrorSeverity", "ErrorStatus",
]
