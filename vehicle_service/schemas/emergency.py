"""
Pydantic schemas for Emergency requests.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Literal, Optional
from vehicle_service.models.emergency import EmergencyStatus, EmergencyType, VehicleType
from vehicle_service.schemas.user import PHONE_PATTERN


class Location(BaseModel):
    """GeoJSON point; coordinates are [longitude, latitude]."""
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2)
    address: str = ""

    @field_validator("coordinates")
    @classmethod
    def check_range(cls, value: List[float]) -> List[float]:
        lng, lat = value
        if not -180 <= lng <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        if not -90 <= lat <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return value


class EmergencyBase(BaseModel):
    """Base emergency schema with common fields."""
    name: str = Field(..., min_length=1)
    contact_number: str = Field(..., pattern=PHONE_PATTERN)
    location: Location
    vehicle_number: Optional[str] = None
    vehicle_type: VehicleType
    vehicle_color: str = Field(..., min_length=1)
    emergency_type: EmergencyType
    description: str = Field(..., min_length=1)

    @field_validator("name", "vehicle_color", "description")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class EmergencyCreate(EmergencyBase):
    """Schema for creating an emergency request."""
    pass


class EmergencyUpdate(BaseModel):
    """Schema for updating an emergency request."""
    name: Optional[str] = Field(None, min_length=1)
    contact_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    location: Optional[Location] = None
    vehicle_number: Optional[str] = None
    vehicle_type: Optional[VehicleType] = None
    vehicle_color: Optional[str] = Field(None, min_length=1)
    emergency_type: Optional[EmergencyType] = None
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[EmergencyStatus] = None
    assigned_to: Optional[str] = None

    @field_validator("name", "vehicle_color", "description")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class Emergency(EmergencyBase):
    """Schema for emergency responses."""
    id: str
    photos: List[str] = []
    status: EmergencyStatus = EmergencyStatus.PENDING
    requested_by: str
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class EmergencyCreated(BaseModel):
    success: bool = True
    data: Emergency
