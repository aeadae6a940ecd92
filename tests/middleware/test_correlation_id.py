"""Tests for correlation ID handling."""

import uuid
from unittest.mock import patch

from flask import Flask
from flask.testing import FlaskClient

from app.models.user import UserRole
from app.utils import get_current_correlation_id


class TestCorrelationIdMiddleware:
    """Test correlation ID middleware functionality."""

    def test_correlation_id_generated_when_missing(self, client: FlaskClient):
        response = client.get("/api/health/healthz")

        assert response.status_code == 200
        uuid.UUID(response.headers["X-Request-Id"])

    def test_correlation_id_preserved_when_provided(self, client: FlaskClient):
        response = client.get("/api/health/healthz", headers={"X-Request-Id": "custom-correlation-123"})

        assert response.headers["X-Request-Id"] == "custom-correlation-123"

    def test_correlation_id_on_auth_failures(self, client: FlaskClient):
        """Rejected requests still carry the correlation id."""
        response = client.get("/api/parts", headers={"X-Request-Id": "auth-error-456"})

        assert response.status_code == 401
        assert response.headers["X-Request-Id"] == "auth-error-456"

    def test_correlation_id_on_unknown_routes(self, client: FlaskClient):
        response = client.get("/api/no-such-endpoint", headers={"X-Request-Id": "not-found-789"})

        assert response.status_code == 404
        assert response.headers["X-Request-Id"] == "not-found-789"

    def test_different_requests_get_different_ids(self, client: FlaskClient):
        first = client.get("/api/health/healthz").headers["X-Request-Id"]
        second = client.get("/api/health/healthz").headers["X-Request-Id"]

        assert first != second

    def test_correlation_id_reaches_services(self, app: Flask, client: FlaskClient, session, users, auth_headers):
        """The correlation id is available while services run."""
        captured = {}

        def capture(*args, **kwargs):
            captured["id"] = get_current_correlation_id()
            return []

        with app.app_context():
            headers = {**auth_headers(users[UserRole.VIEWER]), "X-Request-Id": "service-propagation-202"}

        with patch("app.services.part_service.PartService.list_parts", side_effect=capture):
            response = client.get("/api/parts", headers=headers)

        assert response.status_code == 200
        assert captured["id"] == "service-propagation-202"


class TestCorrelationIdUtils:
    """Test correlation ID utility functions."""

    def test_get_current_correlation_id_without_request_context(self):
        assert get_current_correlation_id() is None
