"""
User document model.
"""
import enum
from typing import Optional

from vehicle_service.database import serialize_document
from vehicle_service.models.base import Document


class UserRole(str, enum.Enum):
    """User role enumeration."""
    USER = "user"
    ADMIN = "admin"


class User(Document):
    """Users collection. Passwords are stored as bcrypt hashes only."""

    __collection__ = "users"
    defaults = {"role": UserRole.USER.value}

    @staticmethod
    def public(doc: Optional[dict]) -> Optional[dict]:
        """Serialize a user without its password hash."""
        data = serialize_document(doc)
        if data is not None:
            data.pop("password_hash", None)
        return data
