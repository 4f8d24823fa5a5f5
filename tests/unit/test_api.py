"""HTTP-level tests for the consultations and auth endpoints."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from src.admin.auth import hash_password
from src.api.v1 import auth as auth_api
from src.config import settings
from src.consultations.dependencies import get_consultation_store
from src.database import get_db
from src.errors import PersistenceError
from src.main import app
from src.redis_client import get_redis
from src.repositories.base import CONNECTION_MESSAGE


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestIntakeEndpoints:
    def test_contact_submission(self, anon_client, contact_payload):
        response = anon_client.post("/api/contact", json=contact_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Message sent successfully"
        consultation = body["consultation"]
        assert consultation["projectType"] == "Contact Form Message"
        assert consultation["status"] == "pending"
        assert consultation["source"] == "contact_form"
        assert consultation["requirements"] == "Need a kitchen redesign"
        assert consultation["kind"] == "contact"
        assert consultation["id"] and consultation["createdAt"]

    def test_contact_missing_fields(self, anon_client, contact_payload, memory_store):
        del contact_payload["name"]
        del contact_payload["email"]

        response = anon_client.post("/api/contact", json=contact_payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert [f["field"] for f in body["fields"]] == ["name", "email"]
        assert len(memory_store) == 0

    def test_booking_submission(self, anon_client, booking_payload):
        response = anon_client.post("/api/consultations", json=booking_payload)

        assert response.status_code == 201
        consultation = response.json()["consultation"]
        assert consultation["status"] == "pending"
        assert consultation["source"] == "website"
        assert consultation["projectType"] == "Kitchen Renovation"
        assert consultation["preferredContactTime"] == "morning"
        assert consultation["kind"] == "booking"
        assert _parse_ts(consultation["date"]) == datetime(2025, 7, 15, 10, 0, tzinfo=timezone.utc)

    def test_booking_invalid_date_writes_nothing(self, make_client, admin_user, booking_payload):
        client = make_client(admin_user)
        booking_payload["date"] = "not-a-date"

        response = client.post("/api/consultations", json=booking_payload)

        assert response.status_code == 400
        fields = response.json()["fields"]
        assert fields == [
            {"field": "date", "message": "Please provide a valid date", "value": "not-a-date"}
        ]
        assert client.get("/api/consultations").json()["total"] == 0

    def test_non_object_body(self, anon_client):
        response = anon_client.post("/api/contact", json=["name", "email"])

        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "body"

    def test_empty_body(self, anon_client):
        response = anon_client.post("/api/consultations")

        assert response.status_code == 400


class TestPersistenceErrors:
    @pytest.fixture
    def failing_client(self, make_client):
        store = AsyncMock()
        store.insert.side_effect = PersistenceError(CONNECTION_MESSAGE, details="connection refused")
        client = make_client(None)
        app.dependency_overrides[get_consultation_store] = lambda: store
        return client

    def test_store_failure_is_500_with_safe_message(self, failing_client, contact_payload):
        response = failing_client.post("/api/contact", json=contact_payload)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "database_error"
        assert body["message"] == CONNECTION_MESSAGE
        assert body["details"] == "connection refused"

    def test_details_hidden_in_production(self, failing_client, contact_payload, monkeypatch):
        monkeypatch.setattr(settings, "environment", "production")

        response = failing_client.post("/api/contact", json=contact_payload)

        assert response.status_code == 500
        assert "details" not in response.json()


class TestAdminEndpoints:
    def test_list_and_filter(self, admin_client, contact_payload, booking_payload):
        admin_client.post("/api/contact", json=contact_payload)
        admin_client.post("/api/consultations", json=booking_payload)
        admin_client.post("/api/consultations", json=booking_payload)

        everything = admin_client.get("/api/consultations").json()
        contacts = admin_client.get("/api/consultations", params={"kind": "contact"}).json()
        bookings = admin_client.get("/api/consultations", params={"kind": "booking"}).json()

        assert everything["total"] == 3
        assert contacts["total"] == 1
        assert bookings["total"] == 2
        all_ids = {c["id"] for c in everything["consultations"]}
        split_ids = {c["id"] for c in contacts["consultations"] + bookings["consultations"]}
        assert all_ids == split_ids

    def test_unknown_kind_filter(self, admin_client):
        response = admin_client.get("/api/consultations", params={"kind": "spam"})

        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "kind"

    def test_reread_matches_creation(self, admin_client, booking_payload):
        created = admin_client.post("/api/consultations", json=booking_payload).json()["consultation"]

        first = admin_client.get(f"/api/consultations/{created['id']}").json()
        second = admin_client.get(f"/api/consultations/{created['id']}").json()

        assert first == created
        assert second == first

    def test_get_unknown_id(self, admin_client):
        response = admin_client.get("/api/consultations/404")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_status_workflow(self, admin_client, booking_payload):
        created = admin_client.post("/api/consultations", json=booking_payload).json()["consultation"]
        url = f"/api/consultations/{created['id']}/status"

        confirmed = admin_client.patch(url, json={"status": "confirmed"})
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        back = admin_client.patch(url, json={"status": "pending"})
        assert back.status_code == 200
        assert back.json()["status"] == "pending"

    def test_invalid_status_leaves_record_unchanged(self, admin_client, booking_payload):
        created = admin_client.post("/api/consultations", json=booking_payload).json()["consultation"]

        response = admin_client.patch(
            f"/api/consultations/{created['id']}/status", json={"status": "archived"}
        )

        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "status"
        assert admin_client.get(f"/api/consultations/{created['id']}").json()["status"] == "pending"

    def test_status_missing_from_body(self, admin_client, booking_payload):
        created = admin_client.post("/api/consultations", json=booking_payload).json()["consultation"]

        response = admin_client.patch(f"/api/consultations/{created['id']}/status", json={})

        assert response.status_code == 400

    def test_status_unknown_id(self, admin_client):
        response = admin_client.patch("/api/consultations/77/status", json={"status": "confirmed"})

        assert response.status_code == 404

    def test_notes(self, admin_client, contact_payload):
        created = admin_client.post("/api/contact", json=contact_payload).json()["consultation"]
        url = f"/api/consultations/{created['id']}/notes"

        saved = admin_client.patch(url, json={"notes": "Call back on Monday"})
        assert saved.json()["notes"] == "Call back on Monday"

        cleared = admin_client.patch(url, json={"notes": ""})
        assert cleared.status_code == 200
        assert cleared.json()["notes"] == ""


class TestAuthorizationBoundary:
    def test_anonymous_cannot_list(self, anon_client):
        response = anon_client.get("/api/consultations")

        assert response.status_code == 401
        assert "consultations" not in response.json()

    def test_regular_user_cannot_list(self, make_client, regular_user):
        response = make_client(regular_user).get("/api/consultations")

        assert response.status_code == 403
        assert response.json() == {"error": "not_authorized", "message": "Admin access required"}

    def test_regular_user_cannot_change_status(
        self, make_client, admin_user, regular_user, booking_payload, memory_store
    ):
        created = make_client(admin_user).post(
            "/api/consultations", json=booking_payload
        ).json()["consultation"]

        response = make_client(regular_user).patch(
            f"/api/consultations/{created['id']}/status", json={"status": "completed"}
        )

        assert response.status_code == 403
        assert len(memory_store) == 1
        reread = make_client(admin_user).get(f"/api/consultations/{created['id']}").json()
        assert reread["status"] == "pending"

    def test_anonymous_cannot_edit_notes(self, anon_client):
        response = anon_client.patch("/api/consultations/1/notes", json={"notes": "x"})

        assert response.status_code == 401


class TestAuthEndpoints:
    @pytest.fixture
    def auth_client(self, make_client, mock_redis, monkeypatch):
        stored_user = SimpleNamespace(
            id=1,
            username="admin",
            password_hash=hash_password("Studio#2025"),
            is_admin=True,
        )

        class FakeUserRepository:
            def __init__(self, db):
                pass

            async def get_by_username(self, username):
                return stored_user if username == "admin" else None

        monkeypatch.setattr(auth_api, "UserRepository", FakeUserRepository)
        client = make_client(None)
        app.dependency_overrides[get_db] = lambda: None
        app.dependency_overrides[get_redis] = lambda: mock_redis
        return client

    def test_login_sets_cookie(self, auth_client, mock_redis):
        response = auth_client.post(
            "/api/auth/login", json={"username": "admin", "password": "Studio#2025"}
        )

        assert response.status_code == 200
        assert response.json() == {"id": 1, "username": "admin", "isAdmin": True}
        assert "admin_token=" in response.headers["set-cookie"]
        mock_redis.setex.assert_called_once()

    def test_login_wrong_password(self, auth_client, mock_redis):
        response = auth_client.post(
            "/api/auth/login", json={"username": "admin", "password": "wrong"}
        )

        assert response.status_code == 401
        mock_redis.setex.assert_not_called()

    def test_login_unknown_user(self, auth_client):
        response = auth_client.post(
            "/api/auth/login", json={"username": "ghost", "password": "Studio#2025"}
        )

        assert response.status_code == 401

    def test_login_missing_password(self, auth_client):
        response = auth_client.post("/api/auth/login", json={"username": "admin"})

        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "password"

    def test_register_weak_password(self, auth_client):
        response = auth_client.post(
            "/api/auth/register", json={"username": "newbie", "password": "short"}
        )

        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "password"

    def test_logout_clears_session(self, auth_client, mock_redis):
        response = auth_client.post("/api/auth/logout", headers={"Cookie": "admin_token=tok"})

        assert response.status_code == 200
        mock_redis.delete.assert_called_once_with("admin_session:tok")

    def test_current_user_requires_login(self, auth_client):
        assert auth_client.get("/api/auth/user").status_code == 401


class TestHealth:
    def test_health(self, anon_client):
        assert anon_client.get("/health").json()["status"] == "ok"
