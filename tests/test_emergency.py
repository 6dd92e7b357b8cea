import json
import os
import unittest

from bson import ObjectId

from tests.base import ApiTestCase
from vehicle_service.models.user import UserRole

LOCATION = json.dumps({"type": "Point", "coordinates": [79.8612, 6.9271], "address": "Colombo 03"})


class EmergencyTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.user = self.create_user()
        self.other = self.create_user(email="other@garage.lk")
        self.admin = self.create_user(email="admin@garage.lk", role=UserRole.ADMIN)

    def form(self, **overrides):
        data = {
            "name": "Saman Kumara",
            "contact_number": "0771234567",
            "location": LOCATION,
            "vehicle_number": "CAB-1234",
            "vehicle_type": "car",
            "vehicle_color": "red",
            "emergency_type": "breakdown",
            "description": "Engine stopped on the highway",
        }
        data.update(overrides)
        return {key: value for key, value in data.items() if value is not None}

    def submit(self, user=None, files=None, **overrides):
        return self.client.post(
            "/api/emergency/",
            data=self.form(**overrides),
            files=files,
            headers=self.auth_headers(user or self.user),
        )

    def uploaded_files(self):
        folder = os.path.join(self.upload_dir, "emergency")
        return os.listdir(folder) if os.path.isdir(folder) else []


class TestCreateEmergency(EmergencyTestCase):

    def test_create_with_photo(self):
        response = self.submit(files=[("photos", self.image())])
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertTrue(data["success"])
        emergency = data["data"]
        self.assertEqual(emergency["status"], "pending")
        self.assertEqual(emergency["requested_by"], str(self.user["_id"]))
        self.assertIsNone(emergency["assigned_to"])
        self.assertEqual(emergency["location"]["coordinates"], [79.8612, 6.9271])

        self.assertEqual(len(emergency["photos"]), 1)
        self.assertTrue(emergency["photos"][0].startswith("http://localhost:5000/uploads/emergency/"))
        self.assertEqual(len(self.uploaded_files()), 1)

        stored = self.db.emergency_requests.find_one({"_id": ObjectId(emergency["id"])})
        self.assertTrue(stored["photos"][0].startswith("uploads/emergency/"))

    def test_create_without_photos(self):
        response = self.submit()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["photos"], [])

    def test_requires_authentication(self):
        response = self.client.post("/api/emergency/", data=self.form())
        self.assertEqual(response.status_code, 401)

    def test_invalid_fields_write_no_files(self):
        response = self.submit(
            files=[("photos", self.image())],
            vehicle_type="spaceship",
            contact_number="123",
        )
        self.assertEqual(response.status_code, 400)
        fields = {error["field"] for error in response.json()["errors"]}
        self.assertEqual(fields, {"vehicle_type", "contact_number"})
        self.assertEqual(self.uploaded_files(), [])
        self.assertEqual(self.db.emergency_requests.count_documents({}), 0)

    def test_location_must_be_json(self):
        response = self.submit(location="not json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "location")

    def test_location_out_of_range(self):
        response = self.submit(location=json.dumps({"coordinates": [200, 6.9]}))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "location.coordinates")

    def test_missing_required_field(self):
        response = self.submit(description=None)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "description")

    def test_rejects_non_image_upload(self):
        response = self.submit(files=[("photos", self.image("notes.txt", b"hello", "text/plain"))])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.db.emergency_requests.count_documents({}), 0)

    def test_rejects_too_many_photos(self):
        files = [("photos", self.image(f"p{i}.jpg")) for i in range(6)]
        response = self.submit(files=files)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.uploaded_files(), [])

    def test_rejects_oversized_photo_and_cleans_up(self):
        self.settings.max_upload_size = 100
        try:
            files = [
                ("photos", self.image("small.png", b"x" * 10)),
                ("photos", self.image("big.png", b"x" * 500)),
            ]
            response = self.submit(files=files)
        finally:
            self.settings.max_upload_size = 5 * 1024 * 1024
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.uploaded_files(), [])


class TestListAndGetEmergency(EmergencyTestCase):

    def test_users_see_their_own_requests(self):
        self.submit()
        self.submit(user=self.other, name="Other Person")

        mine = self.client.get("/api/emergency/", headers=self.auth_headers(self.user)).json()
        self.assertEqual(len(mine), 1)
        self.assertEqual(mine[0]["name"], "Saman Kumara")

        everything = self.client.get("/api/emergency/", headers=self.auth_headers(self.admin)).json()
        self.assertEqual(len(everything), 2)

    def test_filters(self):
        self.submit(vehicle_type="bus", emergency_type="accident")
        self.submit(vehicle_type="car", description="Flat tyre near Kandy")
        headers = self.auth_headers(self.admin)

        buses = self.client.get("/api/emergency/?vehicle_type=bus", headers=headers).json()
        self.assertEqual([e["vehicle_type"] for e in buses], ["bus"])

        kandy = self.client.get("/api/emergency/?search=kandy", headers=headers).json()
        self.assertEqual(len(kandy), 1)

        pending = self.client.get("/api/emergency/?status=pending", headers=headers).json()
        self.assertEqual(len(pending), 2)
        completed = self.client.get("/api/emergency/?status=completed", headers=headers).json()
        self.assertEqual(completed, [])

    def test_negative_paging_is_a_validation_error(self):
        headers = self.auth_headers(self.admin)
        response = self.client.get("/api/emergency/?skip=-1", headers=headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "skip")
        self.assertEqual(self.client.get("/api/emergency/?limit=5000", headers=headers).status_code, 400)

    def test_get_by_id(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.get(f"/api/emergency/{emergency_id}", headers=self.auth_headers(self.user))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], emergency_id)

    def test_other_users_request_is_forbidden(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.get(f"/api/emergency/{emergency_id}", headers=self.auth_headers(self.other))
        self.assertEqual(response.status_code, 403)

        response = self.client.get(f"/api/emergency/{emergency_id}", headers=self.auth_headers(self.admin))
        self.assertEqual(response.status_code, 200)

    def test_missing_and_malformed_ids(self):
        headers = self.auth_headers(self.user)
        missing = self.client.get(f"/api/emergency/{ObjectId()}", headers=headers)
        malformed = self.client.get("/api/emergency/not-an-id", headers=headers)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(malformed.status_code, 404)
        self.assertEqual(missing.json()["detail"], "Emergency request not found")


class TestUpdateAndDeleteEmergency(EmergencyTestCase):

    def test_owner_can_edit_details(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.patch(
            f"/api/emergency/{emergency_id}",
            json={"description": "Battery is dead", "vehicle_color": "blue"},
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "Battery is dead")
        self.assertEqual(response.json()["vehicle_color"], "blue")

    def test_blank_text_is_rejected_and_not_stored(self):
        emergency_id = self.submit().json()["data"]["id"]
        url = f"/api/emergency/{emergency_id}"
        headers = self.auth_headers(self.user)

        response = self.client.patch(url, json={"name": "   "}, headers=headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "name")

        stored = self.db.emergency_requests.find_one({"_id": ObjectId(emergency_id)})
        self.assertEqual(stored["name"], "Saman Kumara")
        self.assertEqual(self.client.get(url, headers=headers).status_code, 200)

    def test_update_text_is_stripped(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.patch(
            f"/api/emergency/{emergency_id}",
            json={"description": "  Overheating  "},
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "Overheating")

    def test_owner_cannot_change_status(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.put(
            f"/api/emergency/{emergency_id}",
            json={"status": "completed"},
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 403)

    def test_non_admin_cannot_update_another_users_request(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.put(
            f"/api/emergency/{emergency_id}",
            json={"description": "Hijacked"},
            headers=self.auth_headers(self.other),
        )
        self.assertEqual(response.status_code, 403)

    def test_admin_can_change_status_in_any_order_and_assign(self):
        emergency_id = self.submit().json()["data"]["id"]
        headers = self.auth_headers(self.admin)

        for new_status in ("completed", "pending", "in_progress"):
            response = self.client.patch(
                f"/api/emergency/{emergency_id}", json={"status": new_status}, headers=headers,
            )
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["status"], new_status)

        response = self.client.patch(
            f"/api/emergency/{emergency_id}",
            json={"assigned_to": str(self.admin["_id"])},
            headers=headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["assigned_to"], str(self.admin["_id"]))

    def test_assign_to_unknown_user(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.patch(
            f"/api/emergency/{emergency_id}",
            json={"assigned_to": str(ObjectId())},
            headers=self.auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 400)

    def test_invalid_status_value(self):
        emergency_id = self.submit().json()["data"]["id"]
        response = self.client.patch(
            f"/api/emergency/{emergency_id}",
            json={"status": "confirmed"},
            headers=self.auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "status")

    def test_delete_removes_photos(self):
        emergency_id = self.submit(files=[("photos", self.image())]).json()["data"]["id"]
        self.assertEqual(len(self.uploaded_files()), 1)

        forbidden = self.client.delete(f"/api/emergency/{emergency_id}", headers=self.auth_headers(self.other))
        self.assertEqual(forbidden.status_code, 403)

        response = self.client.delete(f"/api/emergency/{emergency_id}", headers=self.auth_headers(self.user))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.uploaded_files(), [])

        again = self.client.delete(f"/api/emergency/{emergency_id}", headers=self.auth_headers(self.user))
        self.assertEqual(again.status_code, 404)


if __name__ == "__main__":
    unittest.main()
