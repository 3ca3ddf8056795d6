"""Tests for the dashboard's API client and form helpers."""

import json

import httpx
import pytest

from dashboard.api_client import AdminApiClient, ApiError
from dashboard.forms import build_listing_payload, status_options, validate_listing_form


def make_client(handler, token=None):
    return AdminApiClient("http://api.test/api", token=token, transport=httpx.MockTransport(handler))


class TestAdminApiClient:
    def test_login_stores_token_for_later_calls(self):
        seen = []

        def handler(request):
            seen.append(request)
            if request.url.path == "/api/admin/login":
                return httpx.Response(
                    200,
                    json={"success": True, "data": {"token": "abc", "user": {"id": 1, "name": "Admin"}}},
                )
            return httpx.Response(200, json={"success": True, "data": {"counts": {}}})

        client = make_client(handler)
        admin = client.login("admin@example.com", "secret123")
        client.dashboard()

        assert admin == {"id": 1, "name": "Admin"}
        assert json.loads(seen[0].content) == {"email": "admin@example.com", "password": "secret123"}
        assert "authorization" not in seen[0].headers
        assert seen[1].url.path == "/api/admin/dashboard"
        assert seen[1].headers["authorization"] == "Bearer abc"

    def test_error_envelope_raises(self):
        def handler(request):
            return httpx.Response(401, json={"success": False, "message": "Invalid credentials", "error": "unauthorized"})

        with pytest.raises(ApiError) as excinfo:
            make_client(handler).login("admin@example.com", "bad")

        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Invalid credentials"

    def test_listing_calls_hit_kind_routes(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, dict(request.url.params)))
            return httpx.Response(200, json={"success": True, "data": {"id": 3}})

        client = make_client(handler, token="t")
        client.list_listings("houses", page=2, limit=20)
        client.create_listing("lands", {"title": "x"})
        client.update_listing("apartments", 3, {"price": 1})
        client.delete_listing("lands", 3)

        assert seen == [
            ("GET", "/api/houses/all", {"page": "2", "limit": "20"}),
            ("POST", "/api/lands", {}),
            ("PUT", "/api/apartments/3", {}),
            ("DELETE", "/api/lands/3", {}),
        ]

    def test_unknown_kind(self):
        client = make_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(ValueError):
            client.list_listings("castles")

    def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ApiError, match="Cannot connect"):
            make_client(handler).stats()

    def test_payment_and_user_actions(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            body = json.loads(request.content) if request.content else None
            return httpx.Response(200, json={"success": True, "data": body or {}})

        client = make_client(handler, token="t")
        client.complete_payment(5)
        client.fail_payment(6)
        assert client.update_user_role(7, "admin") == {"role": "admin"}
        client.delete_user(7)

        assert seen == [
            ("PATCH", "/api/payments/5/complete"),
            ("PATCH", "/api/payments/6/fail"),
            ("PUT", "/api/admin/users/7/role"),
            ("DELETE", "/api/admin/users/7"),
        ]


class TestListingForms:
    def test_blank_form_lists_every_problem(self):
        errors = validate_listing_form("lands", {})

        assert "Title is required" in errors
        assert "Location is required" in errors
        assert "Size is required" in errors
        assert "Description is required" in errors
        assert "Price is required" in errors

    def test_valid_land(self):
        values = {
            "title": "Plot",
            "location": "Abuja",
            "price": 1000,
            "size": "500 sqm",
            "description": "Flat land",
            "status": "Available",
            "land_type": "Commercial",
            "images": "https://img/1.jpg\n\nhttps://img/2.jpg",
        }

        assert validate_listing_form("lands", values) == []
        payload = build_listing_payload("lands", values)
        assert payload["type"] == "Commercial"
        assert payload["images"] == ["https://img/1.jpg", "https://img/2.jpg"]
        assert "bedrooms" not in payload

    def test_land_status_options_exclude_rentals(self):
        assert status_options("lands") == ["Available", "Reserved", "Sold"]
        assert "For Rent" in status_options("houses")

    def test_rental_apartment_needs_rent_terms(self):
        values = {
            "title": "Flat",
            "location": "Yaba",
            "price": 500,
            "size": "80 sqm",
            "description": "Nice",
            "status": "For Rent",
            "bedrooms": 1,
            "bathrooms": 1,
            "floor": 2,
            "unit": "2A",
        }
        errors = validate_listing_form("apartments", values)
        assert "Rent price is required for rental listings" in errors

        values.update(rent_price=300.0, rent_period="Monthly")
        assert validate_listing_form("apartments", values) == []
        payload = build_listing_payload("apartments", values)
        assert payload["rentPrice"] == 300.0
        assert payload["unit"] == "2A"
        assert payload["floor"] == 2

    def test_house_needs_property_type(self):
        values = {
            "title": "House",
            "location": "Ikeja",
            "price": 900,
            "size": "200 sqm",
            "description": "Big",
            "bedrooms": 3,
            "bathrooms": 2,
        }
        assert "Property type is required" in validate_listing_form("houses", values)

    def test_negative_price(self):
        errors = validate_listing_form("lands", {"price": -5})
        assert "Price must be greater than 0" in errors
