"""
Pydantic schemas for Vehicle registration requests.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from vehicle_service.models.emergency import VehicleType
from vehicle_service.models.vehicle_registration import RegistrationStatus, VehicleModel


class RegistrationBase(BaseModel):
    """Base registration schema with common fields."""
    name: str = Field(..., min_length=1)
    customer_nic: str = Field(..., min_length=1)
    vehicle_number: str = Field(..., min_length=1)
    vehicle_type: VehicleType
    vehicle_model: VehicleModel
    vehicle_color: str = Field(..., min_length=1)

    @field_validator("name", "customer_nic", "vehicle_number", "vehicle_color")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class RegistrationCreate(RegistrationBase):
    """Schema for submitting a registration request."""
    pass


class RegistrationUpdate(BaseModel):
    """Schema for updating a registration request."""
    name: Optional[str] = Field(None, min_length=1)
    customer_nic: Optional[str] = Field(None, min_length=1)
    vehicle_number: Optional[str] = Field(None, min_length=1)
    vehicle_type: Optional[VehicleType] = None
    vehicle_model: Optional[VehicleModel] = None
    vehicle_color: Optional[str] = Field(None, min_length=1)
    status: Optional[RegistrationStatus] = None

    @field_validator("name", "customer_nic", "vehicle_number", "vehicle_color")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class Registration(RegistrationBase):
    """Schema for registration responses."""
    id: str
    status: RegistrationStatus = RegistrationStatus.PENDING
    requested_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
