"""
Shared fixtures for the API test suites.
"""
import io
import shutil
import tempfile
import unittest

import mongomock
from fastapi.testclient import TestClient

from vehicle_service.auth import create_access_token, hash_password
from vehicle_service.config import get_settings
from vehicle_service.database import get_db
from vehicle_service.main import app
from vehicle_service.models.user import User, UserRole

# smallest valid-looking PNG header; content is never decoded
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class ApiTestCase(unittest.TestCase):
    """Runs the app against an in-memory MongoDB and a temporary upload dir."""

    def setUp(self):
        self.db = mongomock.MongoClient().vehicle_service_test
        app.dependency_overrides[get_db] = lambda: self.db

        self.settings = get_settings()
        self._saved = {
            "upload_dir": self.settings.upload_dir,
            "debug": self.settings.debug,
            "bcrypt_rounds": self.settings.bcrypt_rounds,
            "smtp_host": self.settings.smtp_host,
        }
        self.upload_dir = tempfile.mkdtemp()
        self.settings.upload_dir = self.upload_dir
        self.settings.bcrypt_rounds = 4
        self.settings.smtp_host = None

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        for key, value in self._saved.items():
            setattr(self.settings, key, value)
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def create_user(self, email="user@garage.lk", password="secret123",
                    role=UserRole.USER, name="Test User", phone="0771234567"):
        """Insert a user straight into the database."""
        doc = User.new({
            "name": name,
            "email": email,
            "phone": phone,
            "password_hash": hash_password(password),
            "role": role.value,
        })
        doc["_id"] = self.db.users.insert_one(doc).inserted_id
        return doc

    def auth_headers(self, user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    def image(self, name="photo.png", data=PNG_BYTES, content_type="image/png"):
        return (name, io.BytesIO(data), content_type)
