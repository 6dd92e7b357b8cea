"""
Pydantic schemas for request/response validation.
"""
from vehicle_service.schemas.user import (
    UserBase, UserCreate, UserUpdate, User, Token, LoginRequest, Message, Count,
)
from vehicle_service.schemas.emergency import (
    Location, EmergencyBase, EmergencyCreate, EmergencyUpdate, Emergency,
)
from vehicle_service.schemas.inventory import (
    InventoryBase, InventoryCreate, InventoryUpdate, InventoryItem,
)
from vehicle_service.schemas.vehicle_registration import (
    RegistrationBase, RegistrationCreate, RegistrationUpdate, Registration,
)
from vehicle_service.schemas.vehicle_error import (
    VehicleErrorBase, VehicleErrorCreate, VehicleErrorStatusUpdate, VehicleError,
)

__all__ = [
    "UserBase", "UserCreate", "UserUpdate", "User", "Token", "LoginRequest", "Message", "Count",
    "Location", "EmergencyBase", "EmergencyCreate", "EmergencyUpdate", "Emergency",
    "InventoryBase", "InventoryCreate", "InventoryUpdate", "InventoryItem",
    "RegistrationBase", "RegistrationCreate", "RegistrationUpdate", "Registration",
    "VehicleErrorBase", "VehicleErrorCreate", "VehicleErrorStatusUpdate", "VehicleError",
]
