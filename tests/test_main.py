"""
Tests for the application-level endpoints and wiring.
"""
from datetime import datetime

from woundiq.auth.tokens import TokenIssuer
from woundiq.main import app


def test_root_reports_version(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to WoundIQ API", "version": "1.0.0"}


def test_health_timestamp_is_iso8601(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert datetime.fromisoformat(data["timestamp"]).tzinfo is not None


def test_token_issuer_is_built_once_at_startup():
    assert isinstance(app.state.token_issuer, TokenIssuer)


def test_auth_routes_are_mounted_under_api_v1():
    paths = app.openapi()["paths"]

    for path in ("register", "login", "refresh", "logout", "profile", "change-password"):
        assert f"/api/v1/auth/{path}" in paths
