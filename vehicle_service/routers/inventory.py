"""
Inventory routes.
"""
import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from vehicle_service.auth import require_admin
from vehicle_service.database import get_db, parse_object_id, serialize_document, utcnow
from vehicle_service.errors import validate_form
from vehicle_service.models.inventory import InventoryCategory, InventoryItem
from vehicle_service.schemas.inventory import (
    InventoryCreate, InventoryItem as InventorySchema, InventoryUpdate,
)
from vehicle_service.schemas.user import Message
from vehicle_service.uploads import delete_files, public_url, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])

UPLOAD_FOLDER = "inventory"


def to_response(doc: dict) -> dict:
    data = serialize_document(doc)
    data["product_image"] = public_url(data.get("product_image"))
    return data


def _duplicate_product() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Product ID already exists"
    )


def _get_or_404(db: Database, item_id: str) -> dict:
    oid = parse_object_id(item_id)
    doc = InventoryItem.collection(db).find_one({"_id": oid}) if oid else None
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inventory item not found"
        )
    return doc


@router.get("/", response_model=List[InventorySchema])
def get_inventory(
    category: Optional[InventoryCategory] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=0, le=1000),
    db: Database = Depends(get_db)
):
    """
    Get inventory items sorted by name.
    """
    query = {}
    if category:
        query["category"] = category.value
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"product_name": pattern}, {"product_id": pattern}]

    cursor = (
        InventoryItem.collection(db)
        .find(query)
        .sort("product_name", ASCENDING)
        .skip(skip)
        .limit(limit)
    )
    return [to_response(doc) for doc in cursor]


@router.get("/{item_id}", response_model=InventorySchema)
def get_inventory_item(item_id: str, db: Database = Depends(get_db)):
    """
    Get a specific inventory item by ID.
    """
    return to_response(_get_or_404(db, item_id))


@router.post("/", response_model=InventorySchema, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    product_id: Optional[str] = Form(None),
    product_name: Optional[str] = Form(None),
    product_price: Optional[str] = Form(None),
    product_quantity: Optional[str] = Form(None),
    product_description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    product_image: Optional[UploadFile] = File(None),
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """
    Create a new inventory item.
    """
    item = validate_form(InventoryCreate, {
        "product_id": product_id,
        "product_name": product_name,
        "product_price": product_price,
        "product_quantity": product_quantity,
        "product_description": product_description,
        "category": category,
    })

    items = InventoryItem.collection(db)
    # Check if product id already exists
    if items.find_one({"product_id": item.product_id}):
        raise _duplicate_product()

    image_path = None
    if product_image is not None and product_image.filename:
        image_path = save_upload(product_image, UPLOAD_FOLDER)

    doc = InventoryItem.new(item.model_dump(mode="json"), product_image=image_path)
    try:
        doc["_id"] = items.insert_one(doc).inserted_id
    except DuplicateKeyError:
        delete_files([image_path])
        raise _duplicate_product()

    logger.info("Inventory item %s created", item.product_id)
    return to_response(doc)


@router.put("/{item_id}", response_model=InventorySchema)
def update_inventory_item(
    item_id: str,
    product_id: Optional[str] = Form(None),
    product_name: Optional[str] = Form(None),
    product_price: Optional[str] = Form(None),
    product_quantity: Optional[str] = Form(None),
    product_description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    product_image: Optional[UploadFile] = File(None),
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """
    Update an inventory item. A new image replaces the stored one.
    """
    doc = _get_or_404(db, item_id)
    item_update = validate_form(InventoryUpdate, {
        "product_id": product_id,
        "product_name": product_name,
        "product_price": product_price,
        "product_quantity": product_quantity,
        "product_description": product_description,
        "category": category,
    })

    items = InventoryItem.collection(db)
    update_data = item_update.model_dump(exclude_unset=True, mode="json")
    new_product_id = update_data.get("product_id")
    if new_product_id and new_product_id != doc["product_id"]:
        if items.find_one({"product_id": new_product_id, "_id": {"$ne": doc["_id"]}}):
            raise _duplicate_product()

    old_image = doc.get("product_image")
    if product_image is not None and product_image.filename:
        update_data["product_image"] = save_upload(product_image, UPLOAD_FOLDER)

    if update_data:
        update_data["updated_at"] = utcnow()
        try:
            items.update_one({"_id": doc["_id"]}, {"$set": update_data})
        except DuplicateKeyError:
            delete_files([update_data.get("product_image")])
            raise _duplicate_product()
        doc.update(update_data)

    if "product_image" in update_data and old_image:
        delete_files([old_image])

    return to_response(doc)


@router.delete("/{item_id}", response_model=Message)
def delete_inventory_item(
    item_id: str,
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """
    Delete an inventory item and its image.
    """
    doc = _get_or_404(db, item_id)
    InventoryItem.collection(db).delete_one({"_id": doc["_id"]})
    delete_files([doc.get("product_image")])

    logger.info("Inventory item %s deleted", doc["product_id"])
    return {"message": "Inventory item deleted"}
