"""
MongoDB connection, index setup and document helpers.
"""
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from vehicle_service.config import get_settings

logger = logging.getLogger(__name__)

# collection name -> list of (keys, options)
INDEXES = {
    "users": [
        ([("email", ASCENDING)], {"unique": True}),
    ],
    "emergency_requests": [
        ([("location", "2dsphere")], {}),
        ([("requested_by", ASCENDING), ("created_at", DESCENDING)], {}),
        ([("created_at", DESCENDING)], {}),
    ],
    "inventory_items": [
        ([("product_id", ASCENDING)], {"unique": True}),
        ([("category", ASCENDING)], {}),
        ([("product_name", ASCENDING)], {}),
    ],
    "vehicle_registrations": [
        ([("vehicle_number", ASCENDING)], {"unique": True}),
        ([("created_at", DESCENDING)], {}),
    ],
    "vehicle_errors": [
        ([("reported_by", ASCENDING), ("created_at", DESCENDING)], {}),
        ([("created_at", DESCENDING)], {}),
    ],
}


@lru_cache()
def get_client() -> MongoClient:
    """Get the process-wide MongoDB client."""
    settings = get_settings()
    return MongoClient(settings.mongodb_uri, tz_aware=True)


def get_db() -> Database:
    """
    Dependency that provides the application database.
    """
    return get_client()[get_settings().mongodb_db]


def ensure_indexes(db: Database) -> None:
    """Create every index the collections rely on."""
    for name, specs in INDEXES.items():
        for keys, options in specs:
            db[name].create_index(keys, **options)
            logger.debug("Ensured index %s on %s", keys, name)


def init_db() -> None:
    """Create indexes and seed the bootstrap admin account."""
    # imported here to keep auth -> database a one-way dependency
    from vehicle_service.auth import hash_password
    from vehicle_service.models.user import UserRole

    settings = get_settings()
    db = get_db()
    ensure_indexes(db)

    if settings.admin_email and settings.admin_password:
        email = settings.admin_email.lower()
        if not db.users.find_one({"email": email}):
            now = utcnow()
            db.users.insert_one({
                "name": settings.admin_name,
                "email": email,
                "phone": settings.admin_phone,
                "password_hash": hash_password(settings.admin_password),
                "role": UserRole.ADMIN.value,
                "created_at": now,
                "updated_at": now,
            })
            logger.info("Admin user created: %s", email)


def close_db() -> None:
    if get_client.cache_info().currsize:
        get_client().close()
        get_client.cache_clear()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return ``value`` as an ObjectId, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_document(doc: Optional[dict]) -> Optional[dict]:
    """
    Turn a stored document into a JSON-friendly dict.

    ``_id`` becomes ``id`` and every ObjectId value is rendered as a string.
    """
    if doc is None:
        return None
    data = {}
    for key, value in doc.items():
        if key == "_id":
            key = "id"
        if isinstance(value, ObjectId):
            value = str(value)
        data[key] = value
    return data
