import json
import os
import unittest
from unittest import mock

import mongomock
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from tests.base import PNG_BYTES, ApiTestCase
from vehicle_service import database
from vehicle_service.database import get_client, get_db
from vehicle_service.main import app
from vehicle_service.models.user import UserRole


def lookups_miss(field):
    """Make find_one return None for queries on ``field`` so inserts hit the unique index."""
    original = mongomock.collection.Collection.find_one

    def find_one(self, filter=None, *args, **kwargs):
        if isinstance(filter, dict) and field in filter:
            return None
        return original(self, filter, *args, **kwargs)

    return mock.patch.object(mongomock.collection.Collection, "find_one", find_one)


class StartupTestCase(ApiTestCase):
    """Runs the application lifespan against a shared in-memory client."""

    def setUp(self):
        super().setUp()
        self._saved["admin_email"] = self.settings.admin_email
        self._saved["admin_password"] = self.settings.admin_password
        self.settings.admin_email = "Admin@Garage.lk"
        self.settings.admin_password = "adminpass1"

        mongo = mongomock.MongoClient()
        patcher = mock.patch.object(database, "MongoClient", return_value=mongo)
        patcher.start()
        self.addCleanup(patcher.stop)
        get_client.cache_clear()
        self.addCleanup(get_client.cache_clear)
        self.db = get_db()


class TestStartup(StartupTestCase):

    def test_indexes_are_created(self):
        with TestClient(app):
            users = self.db.users.index_information()
            self.assertTrue(users["email_1"]["unique"])

            emergencies = self.db.emergency_requests.index_information()
            self.assertIn("location_2dsphere", emergencies)
            self.assertIn("created_at_-1", emergencies)

            inventory = self.db.inventory_items.index_information()
            self.assertTrue(inventory["product_id_1"]["unique"])
            self.assertIn("product_name_1", inventory)

            registrations = self.db.vehicle_registrations.index_information()
            self.assertTrue(registrations["vehicle_number_1"]["unique"])
            self.assertIn("created_at_-1", registrations)

    def test_admin_is_seeded_once(self):
        with TestClient(app) as client:
            admin = self.db.users.find_one({"email": "admin@garage.lk"})
            self.assertEqual(admin["role"], UserRole.ADMIN.value)

            response = client.post("/api/auth/login", json={
                "email": "admin@garage.lk", "password": "adminpass1",
            })
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["user"]["role"], "admin")

        with TestClient(app):
            self.assertEqual(self.db.users.count_documents({"email": "admin@garage.lk"}), 1)


class TestUniqueIndexes(StartupTestCase):

    def test_duplicate_email(self):
        payload = {
            "name": "Nimal Perera",
            "email": "nimal@garage.lk",
            "password": "secret123",
            "phone": "0771234567",
        }
        with TestClient(app) as client:
            self.assertEqual(client.post("/api/auth/signup", json=payload).status_code, 201)
            with lookups_miss("email"):
                response = client.post("/api/auth/signup", json=payload)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["detail"], "Email already exists")

    def test_duplicate_product_id_removes_image(self):
        admin = self.create_user(email="manager@garage.lk", role=UserRole.ADMIN)
        data = {"product_id": "OIL-001", "product_name": "Oil", "product_price": "10", "product_quantity": "1"}
        with TestClient(app) as client:
            headers = self.auth_headers(admin)
            self.assertEqual(client.post("/api/inventory/", data=data, headers=headers).status_code, 201)
            with lookups_miss("product_id"):
                response = client.post(
                    "/api/inventory/", data=data, files={"product_image": self.image()}, headers=headers,
                )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["detail"], "Product ID already exists")
            self.assertEqual(os.listdir(os.path.join(self.upload_dir, "inventory")), [])

    def test_duplicate_vehicle_number(self):
        payload = {
            "name": "Nimal Perera",
            "customer_nic": "199012345678",
            "vehicle_number": "WP CAB-1234",
            "vehicle_type": "car",
            "vehicle_model": "Honda",
            "vehicle_color": "grey",
        }
        with TestClient(app) as client:
            self.assertEqual(client.post("/api/vehicle-registration/", json=payload).status_code, 201)
            with lookups_miss("vehicle_number"):
                response = client.post("/api/vehicle-registration/", json=payload)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["detail"], "Vehicle number already registered")


class TestDatabaseFailures(ApiTestCase):

    def test_database_error_is_a_500(self):
        with mock.patch.object(mongomock.collection.Collection, "find",
                               side_effect=PyMongoError("connection lost")):
            response = self.client.get("/api/inventory/")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Database error"})

    def test_health_connected(self):
        db = mock.MagicMock()
        db.command.return_value = {"ok": 1.0}
        app.dependency_overrides[get_db] = lambda: db

        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")
        self.assertEqual(response.json()["database"], "connected")
        db.command.assert_called_once_with("ping")

    def test_health_disconnected(self):
        db = mock.MagicMock()
        db.command.side_effect = PyMongoError("no servers")
        app.dependency_overrides[get_db] = lambda: db

        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "unhealthy")
        self.assertEqual(response.json()["database"], "disconnected")


class TestServedUploads(ApiTestCase):

    def test_uploaded_photo_is_served(self):
        user = self.create_user()
        response = self.client.post(
            "/api/emergency/",
            data={
                "name": "Saman Kumara",
                "contact_number": "0771234567",
                "location": json.dumps({"coordinates": [79.86, 6.93]}),
                "vehicle_type": "car",
                "vehicle_color": "red",
                "emergency_type": "breakdown",
                "description": "Engine stopped",
            },
            files=[("photos", self.image())],
            headers=self.auth_headers(user),
        )
        photo_url = response.json()["data"]["photos"][0]
        path = photo_url[len("http://localhost:5000"):]

        served = self.client.get(path)
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, PNG_BYTES)

    def test_missing_upload(self):
        self.assertEqual(self.client.get("/uploads/emergency/nothing.png").status_code, 404)


if __name__ == "__main__":
    unittest.main()
