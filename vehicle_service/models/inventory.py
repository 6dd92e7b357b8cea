"""
Inventory item document model.
"""
import enum

from vehicle_service.models.base import Document


class InventoryCategory(str, enum.Enum):
    """Spare-part category enumeration."""
    OILS = "oils"
    VEHICLE_LIGHTS = "vehicle lights"
    SHOCK_ABSORBERS = "shock absorbers"
    TIRE = "tire"
    OTHER = "other"


class InventoryItem(Document):
    """Inventory items collection."""

    __collection__ = "inventory_items"
    defaults = {
        "product_description": None,
        "category": InventoryCategory.OTHER.value,
        "product_image": None,
    }
