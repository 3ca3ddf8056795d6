"""Tests for the admin aggregation and user management endpoints."""

from database.models import Favorite, Listing, Payment, User
from enums.user_role import UserRole


class TestDashboard:
    def test_empty_dashboard(self, client, admin_headers):
        data = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]

        assert data["counts"] == {"users": 0, "properties": 0, "payments": 0}
        assert data["totalRevenue"] == 0
        assert data["recentPayments"] == []
        assert data["propertyDistribution"] == {"lands": 0, "houses": 0, "apartments": 0}
        # the admin shows up among recent accounts
        assert [u["email"] for u in data["recentUsers"]] == ["admin@example.com"]

    def test_counts_and_distribution(
        self, client, admin_headers, user, land_payload, house_payload, apartment_payload
    ):
        client.post("/api/lands", json=land_payload, headers=admin_headers)
        client.post("/api/lands", json=land_payload, headers=admin_headers)
        client.post("/api/houses", json=house_payload, headers=admin_headers)
        client.post("/api/apartments", json=apartment_payload, headers=admin_headers)

        data = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]

        assert data["counts"]["users"] == 1
        assert data["counts"]["properties"] == 4
        assert data["propertyDistribution"] == {"lands": 2, "houses": 1, "apartments": 1}

    def test_recent_lists_are_capped(self, client, admin_headers, create_account):
        for i in range(7):
            create_account(f"user{i}@example.com")

        data = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]
        assert len(data["recentUsers"]) == 5


class TestStats:
    def test_status_distribution(self, client, admin_headers, land_payload, house_payload):
        client.post("/api/lands", json={**land_payload, "status": "Sold"}, headers=admin_headers)
        client.post("/api/lands", json=land_payload, headers=admin_headers)
        client.post(
            "/api/houses",
            json={**house_payload, "status": "For Rent", "rentPrice": 900, "rentPeriod": "Monthly"},
            headers=admin_headers,
        )

        data = client.get("/api/admin/stats", headers=admin_headers).json()["data"]

        assert data["propertyStatus"]["lands"] == {"available": 1, "reserved": 0, "sold": 1}
        assert data["propertyStatus"]["houses"]["forRent"] == 1
        assert data["counts"]["lands"] == 2
        assert data["counts"]["houses"] == 1


class TestUsers:
    def test_list_users_paginated_without_passwords(self, client, admin_headers, create_account):
        for i in range(3):
            create_account(f"user{i}@example.com")

        body = client.get("/api/admin/users?page=1&limit=2", headers=admin_headers).json()

        assert body["pagination"] == {"total": 4, "page": 1, "limit": 2, "pages": 2}
        assert all("hashedPassword" not in u and "password" not in u for u in body["data"])

    def test_user_details(self, client, admin_headers, user, user_headers, land_payload):
        land = client.post("/api/lands", json=land_payload, headers=admin_headers).json()["data"]
        payment = client.post(
            "/api/payments", json={"amount": 100, "method": "Cash", "landId": land["id"]}, headers=user_headers
        ).json()["data"]
        client.patch(f"/api/payments/{payment['id']}/complete", headers=admin_headers)

        data = client.get(f"/api/admin/users/{user.id}", headers=admin_headers).json()["data"]

        assert data["user"]["email"] == "buyer@example.com"
        assert [listing["id"] for listing in data["properties"]["lands"]] == [land["id"]]
        assert data["properties"]["houses"] == []
        assert [p["id"] for p in data["payments"]] == [payment["id"]]

    def test_unknown_user(self, client, admin_headers):
        assert client.get("/api/admin/users/999", headers=admin_headers).status_code == 404

    def test_change_role(self, client, admin_headers, user, user_headers):
        response = client.put(f"/api/admin/users/{user.id}/role", json={"role": "admin"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"
        # the existing token now passes admin checks because the role is read per request
        assert client.get("/api/admin/stats", headers=user_headers).status_code == 200

    def test_invalid_role(self, client, admin_headers, user):
        response = client.put(f"/api/admin/users/{user.id}/role", json={"role": "owner"}, headers=admin_headers)
        assert response.status_code == 400

    def test_cannot_demote_self(self, client, admin, admin_headers):
        response = client.put(f"/api/admin/users/{admin.id}/role", json={"role": "user"}, headers=admin_headers)
        assert response.status_code == 400

    def test_delete_user_cascades(
        self, client, admin_headers, user, user_headers, land_payload, db_session
    ):
        land = client.post(
            "/api/lands", json={**land_payload, "ownerId": user.id}, headers=admin_headers
        ).json()["data"]
        client.post(f"/api/lands/favorites/{land['id']}", headers=user_headers)
        client.post(
            "/api/payments", json={"amount": 100, "method": "Cash", "landId": land["id"]}, headers=user_headers
        )
        user_id = user.id

        response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(User, user_id) is None
        assert db_session.query(Favorite).count() == 0
        assert db_session.query(Payment).count() == 0
        assert db_session.get(Listing, land["id"]).owner_id is None

    def test_cannot_delete_self(self, client, admin, admin_headers):
        assert client.delete(f"/api/admin/users/{admin.id}", headers=admin_headers).status_code == 400


class TestPlaceholders:
    def test_sections_answer_with_empty_data(self, client, admin_headers):
        for resource in ("announcements", "teams", "inspections"):
            response = client.get(f"/api/admin/{resource}", headers=admin_headers)
            assert response.status_code == 200
            assert response.json()["data"] == []

            created = client.post(f"/api/admin/{resource}", headers=admin_headers)
            assert created.json()["success"] is True

    def test_sections_need_admin(self, client, user_headers):
        assert client.get("/api/admin/teams", headers=user_headers).status_code == 403


def test_user_role_defaults_to_user(db_session, create_account):
    account = create_account("plain@example.com")
    assert account.role == UserRole.USER.value
    assert not account.is_admin
