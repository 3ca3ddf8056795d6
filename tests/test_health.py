"""Tests for the root endpoints and shared error handling."""


def test_root(client):
    assert client.get("/").json() == {"name": "Real Estate API", "version": "1.0.0"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/castles")

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["error"] == "not_found"


def test_bad_query_parameter_is_400(client):
    response = client.get("/api/lands?page=0")

    assert response.status_code == 400
    assert "page" in response.json()["message"]
