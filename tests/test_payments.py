"""Tests for the payment lifecycle."""

import pytest

from database.models import Purchase


@pytest.fixture
def land_id(client, admin_headers, land_payload):
    response = client.post("/api/lands", json=land_payload, headers=admin_headers)
    return response.json()["data"]["id"]


def pay(client, headers, land_id, amount=25000):
    response = client.post(
        "/api/payments",
        json={"amount": amount, "method": "Credit Card", "landId": land_id},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreatePayment:
    def test_new_payment_is_pending(self, client, user, user_headers, land_id):
        payment = pay(client, user_headers, land_id)

        assert payment["status"] == "Pending"
        assert payment["userId"] == user.id
        assert payment["landId"] == land_id
        assert payment["propertyId"] is None

    def test_listing_reference_required(self, client, user_headers):
        response = client.post(
            "/api/payments", json={"amount": 10, "method": "Cash"}, headers=user_headers
        )
        assert response.status_code == 400

    def test_unknown_listing(self, client, user_headers):
        response = client.post(
            "/api/payments", json={"amount": 10, "method": "Cash", "propertyId": 999}, headers=user_headers
        )
        assert response.status_code == 404

    def test_listing_kind_must_match_field(self, client, admin_headers, user_headers, land_id, house_payload):
        house = client.post("/api/houses", json=house_payload, headers=admin_headers).json()["data"]

        as_land = client.post(
            "/api/payments", json={"amount": 10, "method": "Cash", "landId": house["id"]}, headers=user_headers
        )
        as_property = client.post(
            "/api/payments", json={"amount": 10, "method": "Cash", "propertyId": land_id}, headers=user_headers
        )

        assert as_land.status_code == 400
        assert as_property.status_code == 400

    def test_unknown_method(self, client, user_headers, land_id):
        response = client.post(
            "/api/payments", json={"amount": 10, "method": "Barter", "landId": land_id}, headers=user_headers
        )
        assert response.status_code == 400

    def test_requires_login(self, client, land_id):
        response = client.post("/api/payments", json={"amount": 10, "method": "Cash", "landId": land_id})
        assert response.status_code == 401


class TestPaymentLifecycle:
    def test_complete_records_purchase_and_revenue(
        self, client, user, user_headers, admin_headers, land_id, db_session
    ):
        payment = pay(client, user_headers, land_id)

        response = client.patch(f"/api/payments/{payment['id']}/complete", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Completed"
        assert db_session.get(Purchase, (user.id, land_id)) is not None

        dashboard = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]
        assert dashboard["totalRevenue"] == 25000
        assert dashboard["recentPayments"][0]["land"]["id"] == land_id
        assert dashboard["recentPayments"][0]["user"]["email"] == "buyer@example.com"

    def test_complete_records_every_referenced_listing(
        self, client, user, user_headers, admin_headers, land_id, house_payload, db_session
    ):
        house = client.post("/api/houses", json=house_payload, headers=admin_headers).json()["data"]
        payment = client.post(
            "/api/payments",
            json={"amount": 90000, "method": "Cash", "landId": land_id, "propertyId": house["id"]},
            headers=user_headers,
        ).json()["data"]

        client.patch(f"/api/payments/{payment['id']}/complete", headers=admin_headers)

        assert db_session.get(Purchase, (user.id, land_id)) is not None
        assert db_session.get(Purchase, (user.id, house["id"])) is not None

    def test_failed_payment_adds_no_revenue(self, client, user_headers, admin_headers, land_id):
        payment = pay(client, user_headers, land_id)

        client.patch(f"/api/payments/{payment['id']}/fail", headers=admin_headers)

        stats = client.get("/api/admin/stats", headers=admin_headers).json()["data"]
        assert stats["revenue"] == 0
        assert stats["counts"]["payments"] == 1

    @pytest.mark.parametrize("first, second", [("complete", "fail"), ("fail", "complete"), ("complete", "complete")])
    def test_finalized_payment_is_immutable(self, client, user_headers, admin_headers, land_id, first, second):
        payment = pay(client, user_headers, land_id)
        client.patch(f"/api/payments/{payment['id']}/{first}", headers=admin_headers)

        response = client.patch(f"/api/payments/{payment['id']}/{second}", headers=admin_headers)

        assert response.status_code == 400

    def test_only_admins_finalize(self, client, user_headers, land_id):
        payment = pay(client, user_headers, land_id)
        response = client.patch(f"/api/payments/{payment['id']}/complete", headers=user_headers)
        assert response.status_code == 403

    def test_unknown_payment(self, client, admin_headers):
        assert client.patch("/api/payments/12/complete", headers=admin_headers).status_code == 404


class TestPaymentQueries:
    def test_history_only_shows_own_payments(
        self, client, user_headers, create_account, auth_headers, land_id
    ):
        pay(client, user_headers, land_id, amount=100)
        other_headers = auth_headers(create_account("other@example.com"))
        pay(client, other_headers, land_id, amount=200)

        history = client.get("/api/payments/history", headers=user_headers).json()["data"]

        assert [p["amount"] for p in history] == [100]
        assert history[0]["land"]["title"] == "Riverside plot"

    def test_detail_visible_to_owner_and_admin_only(
        self, client, user_headers, admin_headers, create_account, auth_headers, land_id
    ):
        payment = pay(client, user_headers, land_id)
        url = f"/api/payments/{payment['id']}"
        stranger = auth_headers(create_account("stranger@example.com"))

        assert client.get(url, headers=user_headers).status_code == 200
        assert client.get(url, headers=admin_headers).status_code == 200
        assert client.get(url, headers=stranger).status_code == 403

    def test_admin_list_filters_by_status(self, client, user_headers, admin_headers, land_id):
        first = pay(client, user_headers, land_id)
        pay(client, user_headers, land_id)
        client.patch(f"/api/payments/{first['id']}/complete", headers=admin_headers)

        body = client.get("/api/payments?status=Pending", headers=admin_headers).json()

        assert body["pagination"]["total"] == 1
        assert body["data"][0]["status"] == "Pending"
