"""
Vehicle registration request routes.
"""
import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from vehicle_service.auth import (
    ensure_owner_or_admin, get_current_user, get_optional_user, is_admin,
)
from vehicle_service.database import get_db, parse_object_id, serialize_document, utcnow
from vehicle_service.models.emergency import VehicleType
from vehicle_service.models.vehicle_registration import RegistrationStatus, VehicleRegistration
from vehicle_service.schemas.user import Count, Message
from vehicle_service.schemas.vehicle_registration import (
    Registration as RegistrationSchema, RegistrationCreate, RegistrationUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicle-registration", tags=["vehicle-registration"])


def _duplicate_vehicle() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Vehicle number already registered"
    )


def _get_or_404(db: Database, registration_id: str) -> dict:
    oid = parse_object_id(registration_id)
    doc = VehicleRegistration.collection(db).find_one({"_id": oid}) if oid else None
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle registration request not found"
        )
    return doc


@router.post("/", response_model=RegistrationSchema, status_code=status.HTTP_201_CREATED)
def create_registration(
    registration: RegistrationCreate,
    db: Database = Depends(get_db),
    current_user: Optional[dict] = Depends(get_optional_user)
):
    """
    Submit a vehicle registration request.
    """
    registrations = VehicleRegistration.collection(db)
    # Check if vehicle number already exists
    if registrations.find_one({"vehicle_number": registration.vehicle_number}):
        raise _duplicate_vehicle()

    doc = VehicleRegistration.new(
        registration.model_dump(mode="json"),
        requested_by=current_user["_id"] if current_user else None,
    )
    try:
        doc["_id"] = registrations.insert_one(doc).inserted_id
    except DuplicateKeyError:
        raise _duplicate_vehicle()

    logger.info("Vehicle registration %s submitted", registration.vehicle_number)
    return serialize_document(doc)


@router.get("/", response_model=List[RegistrationSchema])
def get_registrations(
    status_filter: Optional[RegistrationStatus] = Query(None, alias="status"),
    vehicle_type: Optional[VehicleType] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=0, le=1000),
    db: Database = Depends(get_db)
):
    """
    Get registration requests, newest first.
    """
    query = {}
    if status_filter:
        query["status"] = status_filter.value
    if vehicle_type:
        query["vehicle_type"] = vehicle_type.value
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"name": pattern}, {"vehicle_number": pattern}, {"customer_nic": pattern}]

    cursor = (
        VehicleRegistration.collection(db)
        .find(query)
        .sort("created_at", DESCENDING)
        .skip(skip)
        .limit(limit)
    )
    return [serialize_document(doc) for doc in cursor]


@router.get("/count", response_model=Count)
def count_registrations(db: Database = Depends(get_db)):
    """Total number of registration requests."""
    return {"count": VehicleRegistration.collection(db).count_documents({})}


@router.get("/{registration_id}", response_model=RegistrationSchema)
def get_registration(registration_id: str, db: Database = Depends(get_db)):
    """
    Get a specific registration request by ID.
    """
    return serialize_document(_get_or_404(db, registration_id))


@router.put("/{registration_id}", response_model=RegistrationSchema)
def update_registration(
    registration_id: str,
    registration_update: RegistrationUpdate,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Update a registration request. Only admins may change the status.
    """
    doc = _get_or_404(db, registration_id)
    ensure_owner_or_admin(current_user, doc.get("requested_by"))

    update_data = registration_update.model_dump(exclude_unset=True, exclude_none=True, mode="json")
    if "status" in update_data and update_data["status"] != doc.get("status") and not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can change status"
        )

    registrations = VehicleRegistration.collection(db)
    new_number = update_data.get("vehicle_number")
    if new_number and new_number != doc["vehicle_number"]:
        if registrations.find_one({"vehicle_number": new_number, "_id": {"$ne": doc["_id"]}}):
            raise _duplicate_vehicle()

    if update_data:
        update_data["updated_at"] = utcnow()
        try:
            registrations.update_one({"_id": doc["_id"]}, {"$set": update_data})
        except DuplicateKeyError:
            raise _duplicate_vehicle()
        doc.update(update_data)

    return serialize_document(doc)


@router.delete("/{registration_id}", response_model=Message)
def delete_registration(
    registration_id: str,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Delete a registration request.
    """
    doc = _get_or_404(db, registration_id)
    ensure_owner_or_admin(current_user, doc.get("requested_by"))
    VehicleRegistration.collection(db).delete_one({"_id": doc["_id"]})
    return {"message": "Vehicle registration request deleted"}
