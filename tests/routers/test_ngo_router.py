"""Tests for NGO router endpoints."""

import pytest
from fastapi.testclient import TestClient

from taskmatch.models.enums import NgoStatus
from taskmatch.models.ngo import Ngo
from taskmatch.models.user import User
from tests.factories import auth_headers, ngo_principal, principal_of

NGO_PAYLOAD = {
    "organization_name": "Green Rivers",
    "registration_number": "REG-ROUTER-01",
    "category": "Environment",
    "description": "River and wetland restoration volunteers",
    "city": "Springfield",
    "state": "IL",
}
REJECTION = {"rejection_reason": "Registration documents could not be verified"}


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin: User) -> dict:
    return auth_headers(principal_of(admin))


class TestRegisterNgo:
    def test_register(self, client: TestClient, volunteer: User):
        response = client.post(
            "/ngos", json=NGO_PAYLOAD, headers=auth_headers(principal_of(volunteer))
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["id_user"] == volunteer.id_user
        assert data["total_tasks"] == 0

    def test_register_twice(self, client: TestClient, approved_ngo: Ngo):
        response = client.post(
            "/ngos", json=NGO_PAYLOAD, headers=auth_headers(ngo_principal(approved_ngo))
        )

        assert response.status_code == 409
        assert response.json()["code"] == "already_exists"

    def test_register_requires_auth(self, client: TestClient):
        assert client.post("/ngos", json=NGO_PAYLOAD).status_code == 401


class TestGetNgo:
    def test_get_ngo(self, client: TestClient, approved_ngo: Ngo, task_factory):
        task_factory()

        response = client.get(f"/ngos/{approved_ngo.id_ngo}")

        assert response.status_code == 200
        assert response.json()["total_tasks"] == 1
        assert response.json()["status"] == "approved"

    def test_unknown_ngo(self, client: TestClient):
        assert client.get("/ngos/99999").status_code == 404


class TestModerationEndpoints:
    def test_approve(self, client: TestClient, admin_headers, ngo_factory):
        pending = ngo_factory(NgoStatus.PENDING)

        response = client.patch(
            f"/ngos/{pending.id_ngo}/approve",
            json={"admin_notes": "Documents checked"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert response.json()["is_verified"] is True

    def test_approve_twice(self, client: TestClient, admin_headers, approved_ngo: Ngo):
        response = client.patch(
            f"/ngos/{approved_ngo.id_ngo}/approve", json={}, headers=admin_headers
        )
        assert response.status_code == 409
        assert response.json()["code"] == "conflict"

    def test_reject(self, client: TestClient, admin_headers, approved_ngo: Ngo):
        response = client.patch(
            f"/ngos/{approved_ngo.id_ngo}/reject", json=REJECTION, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

    def test_reject_short_reason(self, client: TestClient, admin_headers, approved_ngo: Ngo):
        response = client.patch(
            f"/ngos/{approved_ngo.id_ngo}/reject",
            json={"rejection_reason": "no"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_non_admin(self, client: TestClient, approved_ngo: Ngo, ngo_factory):
        pending = ngo_factory(NgoStatus.PENDING)
        response = client.patch(
            f"/ngos/{pending.id_ngo}/approve",
            json={},
            headers=auth_headers(ngo_principal(approved_ngo)),
        )
        assert response.status_code == 403
