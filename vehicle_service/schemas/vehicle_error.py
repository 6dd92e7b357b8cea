"""
Pydantic schemas for Vehicle error reports.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from vehicle_service.models.vehicle_error import ErrorSeverity, ErrorStatus


class VehicleErrorBase(BaseModel):
    """Base error report schema with common fields."""
    vehicle_registration_number: str = Field(..., min_length=1)
    error_type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    location: str = Field(..., min_length=1)

    @field_validator("vehicle_registration_number", "error_type")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class VehicleErrorCreate(VehicleErrorBase):
    """Schema for reporting a vehicle error."""
    pass


class VehicleErrorStatusUpdate(BaseModel):
    """Schema for an admin status change."""
    status: ErrorStatus
    resolution_notes: Optional[str] = None


class VehicleError(VehicleErrorBase):
    """Schema for error report responses."""
    id: str
    photos: List[str] = []
    status: ErrorStatus = ErrorStatus.PENDING
    reported_by: str
    reporter_name: Optional[str] = None
    resolved_by: Optional[str] = None
    resolution_notes: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None


class ImageUploaded(BaseModel):
    image_url: str
