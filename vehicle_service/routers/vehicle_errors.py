"""
Vehicle error report routes.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pymongo import DESCENDING
from pymongo.database import Database

from vehicle_service.auth import ensure_owner_or_admin, get_current_user, require_admin
from vehicle_service.database import get_db, parse_object_id, serialize_document, utcnow
from vehicle_service.errors import validate_form
from vehicle_service.models.user import User
from vehicle_service.models.vehicle_error import ErrorStatus, VehicleError
from vehicle_service.schemas.user import Count, Message
from vehicle_service.schemas.vehicle_error import (
    ImageUploaded, VehicleError as VehicleErrorSchema, VehicleErrorCreate, VehicleErrorStatusUpdate,
)
from vehicle_service.uploads import delete_files, public_url, save_upload, save_uploads

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicle-errors", tags=["vehicle-errors"])

PHOTO_FOLDER = "error-photos"
IMAGE_FOLDER = "vehicle-errors"


def to_response(doc: dict, reporter_name: Optional[str] = None) -> dict:
    data = serialize_document(doc)
    data["photos"] = [public_url(p) for p in data.get("photos") or []]
    if reporter_name is not None:
        data["reporter_name"] = reporter_name
    return data


def _get_or_404(db: Database, error_id: str) -> dict:
    oid = parse_object_id(error_id)
    doc = VehicleError.collection(db).find_one({"_id": oid}) if oid else None
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Error report not found"
        )
    return doc


@router.post("/report", response_model=VehicleErrorSchema, status_code=status.HTTP_201_CREATED)
def report_error(
    vehicle_registration_number: Optional[str] = Form(None),
    error_type: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    severity: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Report a vehicle error with one to five photos.
    """
    report = validate_form(VehicleErrorCreate, {
        "vehicle_registration_number": vehicle_registration_number,
        "error_type": error_type,
        "description": description,
        "severity": severity,
        "location": location,
    })
    if not [f for f in photos or [] if f.filename]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload at least one photo"
        )

    photo_paths = save_uploads(photos, PHOTO_FOLDER)
    doc = VehicleError.new(
        report.model_dump(mode="json"),
        photos=photo_paths,
        reported_by=current_user["_id"],
    )
    try:
        doc["_id"] = VehicleError.collection(db).insert_one(doc).inserted_id
    except Exception:
        delete_files(photo_paths)
        raise

    logger.info("Vehicle error %s reported by %s", doc["_id"], current_user["email"])
    return to_response(doc)


@router.get("/my-errors", response_model=List[VehicleErrorSchema])
def get_my_errors(
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """The caller's error reports, newest first."""
    cursor = VehicleError.collection(db).find(
        {"reported_by": current_user["_id"]}
    ).sort("created_at", DESCENDING)
    return [to_response(doc) for doc in cursor]


@router.get("/all", response_model=List[VehicleErrorSchema])
def get_all_errors(
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """
    Every error report with the reporter's name (admin only).
    """
    docs = list(VehicleError.collection(db).find().sort("created_at", DESCENDING))
    reporter_ids = list({doc["reported_by"] for doc in docs})
    names = {
        user["_id"]: user.get("name", "")
        for user in User.collection(db).find({"_id": {"$in": reporter_ids}}, {"name": 1})
    }
    return [to_response(doc, names.get(doc["reported_by"], "")) for doc in docs]


@router.get("/count", response_model=Count)
def count_errors(
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """Total number of error reports (admin only)."""
    return {"count": VehicleError.collection(db).count_documents({})}


@router.post("/upload", response_model=ImageUploaded)
def upload_image(
    image: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user)
):
    """
    Store a single image and return its URL.
    """
    if image is None or not image.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload an image"
        )
    return {"image_url": public_url(save_upload(image, IMAGE_FOLDER))}


@router.get("/{error_id}", response_model=VehicleErrorSchema)
def get_error(
    error_id: str,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Get a specific error report by ID.
    """
    doc = _get_or_404(db, error_id)
    ensure_owner_or_admin(current_user, doc.get("reported_by"))
    return to_response(doc)


@router.patch("/{error_id}/status", response_model=VehicleErrorSchema)
def update_error_status(
    error_id: str,
    status_update: VehicleErrorStatusUpdate,
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """
    Change the status of an error report (admin only).
    """
    doc = _get_or_404(db, error_id)

    update_data = {"status": status_update.status.value, "updated_at": utcnow()}
    if status_update.resolution_notes is not None:
        update_data["resolution_notes"] = status_update.resolution_notes
    if status_update.status == ErrorStatus.RESOLVED:
        update_data["resolved_by"] = current_user["_id"]

    VehicleError.collection(db).update_one({"_id": doc["_id"]}, {"$set": update_data})
    doc.update(update_data)
    return to_response(doc)


@router.delete("/{error_id}", response_model=Message)
def delete_error(
    error_id: str,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Delete an error report and its photos.
    """
    doc = _get_or_404(db, error_id)
    ensure_owner_or_admin(current_user, doc.get("reported_by"))

    VehicleError.collection(db).delete_one({"_id": doc["_id"]})
    delete_files(doc.get("photos") or [])
    return {"message": "Error report deleted"}
