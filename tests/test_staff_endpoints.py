"""Tests for staff directory endpoints."""

from collections.abc import Callable
from uuid import uuid4

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
class TestStaffEndpoints:
    """Tests for /staff endpoints."""

    async def test_create_staff_as_admin(
        self,
        client: AsyncClient,
        admin_token: str,
        admin_user: dict,
        staff_payload: Callable[..., dict],
    ):
        """Administrators create staff and are recorded as the creator."""
        response = await client.post(
            "/api/v1/staff",
            json=staff_payload(role="Cashier"),
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["staffId"] == "CA001"
        assert data["role"] == "Cashier"
        assert data["createdBy"] == str(admin_user["id"])
        assert data["createdByUsername"] == "admin"
        assert "password" not in data
        assert "passwordHash" not in data

    async def test_create_staff_as_manager(
        self,
        client: AsyncClient,
        manager_token: str,
        staff_payload: Callable[..., dict],
    ):
        """Managers create staff without an administrator creator."""
        response = await client.post(
            "/api/v1/staff",
            json=staff_payload(role="Baker"),
            headers={"Authorization": f"Bearer {manager_token}"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["staffId"] == "BK001"
        assert data["createdBy"] is None

    async def test_create_staff_as_barista_forbidden(
        self,
        client: AsyncClient,
        barista_token: str,
        staff_payload: Callable[..., dict],
    ):
        """Other roles may not manage staff."""
        response = await client.post(
            "/api/v1/staff",
            json=staff_payload(),
            headers={"Authorization": f"Bearer {barista_token}"},
        )

        assert response.status_code == 403

    async def test_create_staff_invalid_payload(
        self,
        client: AsyncClient,
        admin_token: str,
        staff_payload: Callable[..., dict],
    ):
        """Invalid fields are rejected with 422 and per-field details."""
        response = await client.post(
            "/api/v1/staff",
            json=staff_payload(role="Sommelier", email="bad", password="123"),
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert len(data["details"]) >= 3

    async def test_create_staff_username_like_staff_id(
        self,
        client: AsyncClient,
        admin_token: str,
        staff_payload: Callable[..., dict],
    ):
        """Identifier-shaped usernames are refused before any identifier is allocated."""
        headers = {"Authorization": f"Bearer {admin_token}"}

        rejected = await client.post(
            "/api/v1/staff", json=staff_payload(username="BA002"), headers=headers
        )
        accepted = await client.post("/api/v1/staff", json=staff_payload(), headers=headers)

        assert rejected.status_code == 422
        assert rejected.json()["details"][0]["loc"][-1] == "username"
        assert accepted.status_code == 201
        assert accepted.json()["staffId"] == "BA001"

    async def test_create_staff_duplicate_email(
        self,
        client: AsyncClient,
        admin_token: str,
        barista: dict,
        staff_payload: Callable[..., dict],
    ):
        """A reused email is a conflict."""
        response = await client.post(
            "/api/v1/staff",
            json=staff_payload(email=barista["email"]),
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "DuplicateEmailException"
        assert data["message"] == "Email address already exists"

    async def test_list_staff(
        self,
        client: AsyncClient,
        admin_token: str,
        barista: dict,
        manager: dict,
    ):
        """The listing includes every member and the total."""
        response = await client.get(
            "/api/v1/staff",
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {s["staffId"] for s in data["staff"]} == {barista["staff_id"], manager["staff_id"]}

    async def test_list_staff_by_role(
        self,
        client: AsyncClient,
        manager_token: str,
        barista: dict,
    ):
        """The role query parameter filters the listing."""
        response = await client.get(
            "/api/v1/staff",
            params={"role": "Barista"},
            headers={"Authorization": f"Bearer {manager_token}"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["staff"][0]["staffId"] == barista["staff_id"]

    async def test_get_staff(self, client: AsyncClient, admin_token: str, barista: dict):
        """A single member can be fetched by internal id."""
        response = await client.get(
            f"/api/v1/staff/{barista['id']}",
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 200
        assert response.json()["username"] == "jamie.p"

    async def test_get_staff_not_found(self, client: AsyncClient, admin_token: str):
        """Unknown ids return 404."""
        response = await client.get(
            f"/api/v1/staff/{uuid4()}",
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 404

    async def test_update_staff_role(self, client: AsyncClient, admin_token: str, barista: dict):
        """Role changes keep the staff identifier."""
        response = await client.put(
            f"/api/v1/staff/{barista['id']}",
            json={"role": "Cashier", "staffId": "CA777"},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "Cashier"
        assert data["staffId"] == barista["staff_id"]

    async def test_reset_password(
        self,
        client: AsyncClient,
        manager_token: str,
        barista: dict,
    ):
        """After a reset only the new password logs in."""
        response = await client.post(
            f"/api/v1/staff/{barista['id']}/reset-password",
            json={"newPassword": "fresh-pass"},
            headers={"Authorization": f"Bearer {manager_token}"},
        )

        assert response.status_code == 200
        assert "Jamie Pour" in response.json()["message"]

        old_login = await client.post(
            "/api/v1/staff-auth/login",
            json={"staffId": barista["staff_id"], "password": "secret123"},
        )
        new_login = await client.post(
            "/api/v1/staff-auth/login",
            json={"staffId": barista["staff_id"], "password": "fresh-pass"},
        )

        assert old_login.status_code == 401
        assert new_login.status_code == 200

    async def test_reset_password_too_short(
        self,
        client: AsyncClient,
        admin_token: str,
        barista: dict,
    ):
        """Short passwords are rejected."""
        response = await client.post(
            f"/api/v1/staff/{barista['id']}/reset-password",
            json={"newPassword": "12345"},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "newPassword"

    async def test_delete_staff(self, client: AsyncClient, admin_token: str, barista: dict):
        """Deleted members are gone and cannot be deleted twice."""
        headers = {"Authorization": f"Bearer {admin_token}"}

        response = await client.delete(f"/api/v1/staff/{barista['id']}", headers=headers)
        assert response.status_code == 204

        response = await client.get(f"/api/v1/staff/{barista['id']}", headers=headers)
        assert response.status_code == 404

        response = await client.delete(f"/api/v1/staff/{barista['id']}", headers=headers)
        assert response.status_code == 404

    async def test_unauthenticated(self, client: AsyncClient):
        """The directory requires authentication."""
        response = await client.get("/api/v1/staff")

        assert response.status_code in (401, 403)
