"""Tests for user router endpoints."""

from fastapi.testclient import TestClient

from taskmatch.models.user import User
from tests.factories import auth_headers, principal_of


class TestUserEndpoints:
    def test_read_me(self, client: TestClient, volunteer: User):
        response = client.get("/users/me", headers=auth_headers(principal_of(volunteer)))

        assert response.status_code == 200
        data = response.json()
        assert data["id_user"] == volunteer.id_user
        assert data["role"] == "volunteer"
        assert data["total_hours"] == 0
        assert data["completed_tasks"] == []

    def test_read_me_unauthenticated(self, client: TestClient):
        assert client.get("/users/me").status_code == 401

    def test_read_other_user_forbidden(
        self, client: TestClient, volunteer: User, user_factory
    ):
        other = user_factory()
        response = client.get(
            f"/users/{other.id_user}", headers=auth_headers(principal_of(volunteer))
        )
        assert response.status_code == 403

    def test_admin_reads_any_user(self, client: TestClient, admin: User, volunteer: User):
        response = client.get(
            f"/users/{volunteer.id_user}", headers=auth_headers(principal_of(admin))
        )
        assert response.status_code == 200
        assert response.json()["email"] == volunteer.email

    def test_admin_provisions_user(self, client: TestClient, admin: User):
        headers = auth_headers(principal_of(admin))
        body = {"name": "New Helper", "email": "new.helper@example.com"}

        created = client.post("/users", json=body, headers=headers)
        duplicate = client.post("/users", json=body, headers=headers)

        assert created.status_code == 201
        assert created.json()["role"] == "volunteer"
        assert duplicate.status_code == 409

    def test_volunteer_cannot_provision(self, client: TestClient, volunteer: User):
        response = client.post(
            "/users",
            json={"name": "Sneaky", "email": "sneaky@example.com"},
            headers=auth_headers(principal_of(volunteer)),
        )
        assert response.status_code == 403
