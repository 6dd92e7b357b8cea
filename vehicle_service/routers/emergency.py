"""
Emergency request routes.
"""
import json
import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pymongo import DESCENDING
from pymongo.database import Database

from vehicle_service.auth import ensure_owner_or_admin, get_current_user, is_admin
from vehicle_service.database import get_db, parse_object_id, serialize_document, utcnow
from vehicle_service.errors import validate_form
from vehicle_service.models.emergency import (
    EmergencyRequest, EmergencyStatus, EmergencyType, VehicleType,
)
from vehicle_service.models.user import User
from vehicle_service.schemas.emergency import (
    Emergency as EmergencySchema, EmergencyCreate, EmergencyCreated, EmergencyUpdate,
)
from vehicle_service.schemas.user import Message
from vehicle_service.uploads import delete_files, public_url, save_uploads

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emergency", tags=["emergency"])

UPLOAD_FOLDER = "emergency"
ADMIN_FIELDS = ("status", "assigned_to")
NULLABLE_FIELDS = ("assigned_to", "vehicle_number")


def to_response(doc: dict) -> dict:
    """Serialize a request with photo paths rewritten to URLs."""
    data = serialize_document(doc)
    data["photos"] = [public_url(p) for p in data.get("photos") or []]
    return data


def _get_or_404(db: Database, emergency_id: str) -> dict:
    oid = parse_object_id(emergency_id)
    doc = EmergencyRequest.collection(db).find_one({"_id": oid}) if oid else None
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Emergency request not found"
        )
    return doc


def _parse_location(raw: Optional[str]):
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise RequestValidationError([{
            "loc": ("body", "location"),
            "msg": "Location must be a JSON object",
            "type": "value_error",
        }])


@router.post("/", response_model=EmergencyCreated, status_code=status.HTTP_201_CREATED)
def create_emergency(
    name: Optional[str] = Form(None),
    contact_number: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    vehicle_number: Optional[str] = Form(None),
    vehicle_type: Optional[str] = Form(None),
    vehicle_color: Optional[str] = Form(None),
    emergency_type: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Submit an emergency request with up to five photos.
    """
    emergency = validate_form(EmergencyCreate, {
        "name": name,
        "contact_number": contact_number,
        "location": _parse_location(location),
        "vehicle_number": vehicle_number,
        "vehicle_type": vehicle_type,
        "vehicle_color": vehicle_color,
        "emergency_type": emergency_type,
        "description": description,
    })

    photo_paths = save_uploads(photos, UPLOAD_FOLDER)
    doc = EmergencyRequest.new(
        emergency.model_dump(mode="json"),
        photos=photo_paths,
        requested_by=current_user["_id"],
    )
    try:
        doc["_id"] = EmergencyRequest.collection(db).insert_one(doc).inserted_id
    except Exception:
        delete_files(photo_paths)
        raise

    logger.info("Emergency request %s created by %s", doc["_id"], current_user["email"])
    return {"success": True, "data": to_response(doc)}


@router.get("/", response_model=List[EmergencySchema])
def get_emergencies(
    status_filter: Optional[EmergencyStatus] = Query(None, alias="status"),
    vehicle_type: Optional[VehicleType] = None,
    emergency_type: Optional[EmergencyType] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=0, le=1000),
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    List emergency requests, newest first.

    Admins see every request; other users see their own.
    """
    query = {}
    if not is_admin(current_user):
        query["requested_by"] = current_user["_id"]
    if status_filter:
        query["status"] = status_filter.value
    if vehicle_type:
        query["vehicle_type"] = vehicle_type.value
    if emergency_type:
        query["emergency_type"] = emergency_type.value
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"name": pattern}, {"description": pattern}, {"vehicle_number": pattern}]

    cursor = (
        EmergencyRequest.collection(db)
        .find(query)
        .sort("created_at", DESCENDING)
        .skip(skip)
        .limit(limit)
    )
    return [to_response(doc) for doc in cursor]


@router.get("/{emergency_id}", response_model=EmergencySchema)
def get_emergency(
    emergency_id: str,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Get a specific emergency request by ID.
    """
    doc = _get_or_404(db, emergency_id)
    ensure_owner_or_admin(current_user, doc.get("requested_by"))
    return to_response(doc)


@router.put("/{emergency_id}", response_model=EmergencySchema)
@router.patch("/{emergency_id}", response_model=EmergencySchema)
def update_emergency(
    emergency_id: str,
    emergency_update: EmergencyUpdate,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Update an emergency request.

    Owners may edit their own request; only admins may change the status or
    the assignee.
    """
    doc = _get_or_404(db, emergency_id)
    ensure_owner_or_admin(current_user, doc.get("requested_by"))

    # Update only provided fields
    update_data = {
        field: value
        for field, value in emergency_update.model_dump(exclude_unset=True, mode="json").items()
        if value is not None or field in NULLABLE_FIELDS
    }

    if "assigned_to" in update_data and update_data["assigned_to"] is not None:
        assignee_id = parse_object_id(update_data["assigned_to"])
        if not assignee_id or not User.collection(db).find_one({"_id": assignee_id}):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assigned user not found"
            )
        update_data["assigned_to"] = assignee_id

    changed_admin_fields = [
        field for field in ADMIN_FIELDS
        if field in update_data and update_data[field] != doc.get(field)
    ]
    if changed_admin_fields and not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only admins can change {', '.join(changed_admin_fields)}"
        )

    if update_data:
        update_data["updated_at"] = utcnow()
        EmergencyRequest.collection(db).update_one({"_id": doc["_id"]}, {"$set": update_data})
        doc.update(update_data)

    return to_response(doc)


@router.delete("/{emergency_id}", response_model=Message)
def delete_emergency(
    emergency_id: str,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Delete an emergency request and its photos.
    """
    doc = _get_or_404(db, emergency_id)
    ensure_owner_or_admin(current_user, doc.get("requested_by"))

    EmergencyRequest.collection(db).delete_one({"_id": doc["_id"]})
    delete_files(doc.get("photos") or [])

    logger.info("Emergency request %s deleted by %s", doc["_id"], current_user["email"])
    return {"message": "Emergency request deleted"}
