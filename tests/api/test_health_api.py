"""Tests for health check API endpoints."""

from flask import Flask
from flask.testing import FlaskClient


class TestHealthEndpoints:
    """Test health check endpoints for Kubernetes probes."""

    def test_readyz_when_ready(self, client: FlaskClient):
        """Readiness probe returns 200 when the database answers."""
        response = client.get("/api/health/readyz")

        assert response.status_code == 200
        assert response.json["status"] == "ready"
        assert response.json["ready"] is True
        assert response.json["database"] == "ok"

    def test_readyz_when_database_unavailable(self, client: FlaskClient, monkeypatch):
        """Readiness probe returns 503 when the database cannot be reached."""
        import app.api.health as health_module

        monkeypatch.setattr(health_module, "check_db_connection", lambda: False)

        response = client.get("/api/health/readyz")

        assert response.status_code == 503
        assert response.json["ready"] is False
        assert response.json["database"] == "error"

    def test_healthz_always_returns_200(self, client: FlaskClient):
        """Liveness probe always returns 200."""
        response = client.get("/api/health/healthz")

        assert response.status_code == 200
        assert response.json["status"] == "alive"
        assert response.json["ready"] is True

    def test_probes_do_not_require_token(self, app: Flask, client: FlaskClient):
        for path in ("/api/health/readyz", "/api/health/healthz"):
            assert client.get(path).status_code != 401
