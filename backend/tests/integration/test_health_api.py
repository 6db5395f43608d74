"""Integration tests for the health endpoint and generic error handling."""

from __future__ import annotations


def test_health_reports_store_backend(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["token_store"] == "sqlalchemy"
    assert body["version"] == "dev"


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/does-not-exist")

    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["code"] == "not_found"
    assert body["request_id"]


def test_method_not_allowed(client):
    resp = client.get("/api/v1/auth/refresh")

    assert resp.status_code == 405
    assert resp.get_json()["code"] == "method_not_allowed"


def test_response_carries_request_id(client):
    resp = client.get("/api/v1/health")

    assert resp.headers["X-Request-ID"]
