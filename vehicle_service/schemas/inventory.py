"""
Pydantic schemas for Inventory items.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from vehicle_service.models.inventory import InventoryCategory


class InventoryBase(BaseModel):
    """Base inventory schema with common fields."""
    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    product_price: float = Field(..., ge=0)
    product_quantity: int = Field(..., ge=0)
    product_description: Optional[str] = None
    category: InventoryCategory = InventoryCategory.OTHER

    @field_validator("product_id", "product_name")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class InventoryCreate(InventoryBase):
    """Schema for creating an inventory item."""
    pass


class InventoryUpdate(BaseModel):
    """Schema for updating an inventory item."""
    product_id: Optional[str] = Field(None, min_length=1)
    product_name: Optional[str] = Field(None, min_length=1)
    product_price: Optional[float] = Field(None, ge=0)
    product_quantity: Optional[int] = Field(None, ge=0)
    product_description: Optional[str] = None
    category: Optional[InventoryCategory] = None

    @field_validator("product_id", "product_name")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Field must not be empty")
        return value


class InventoryItem(InventoryBase):
    """Schema for inventory responses."""
    id: str
    product_image: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
