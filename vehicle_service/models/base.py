"""
Base class for document models.
"""
from typing import Any, ClassVar

from pymongo.collection import Collection
from pymongo.database import Database

from vehicle_service.database import utcnow


class Document:
    """A MongoDB collection together with the defaults of its documents."""

    __collection__: ClassVar[str]
    defaults: ClassVar[dict[str, Any]] = {}

    @classmethod
    def collection(cls, db: Database) -> Collection:
        return db[cls.__collection__]

    @classmethod
    def new(cls, data: dict, **extra) -> dict:
        """Build a document ready for insertion, with timestamps set."""
        now = utcnow()
        doc = {**cls.defaults, **data, **extra}
        doc["created_at"] = now
        doc["updated_at"] = now
        return doc
