"""Tests for report API endpoints."""

from datetime import date, timedelta

from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.orm import Session

from app.models.user import UserRole


class TestReportsAPI:
    """Test cases for report endpoints."""

    def test_summary(self, app: Flask, client: FlaskClient, session: Session, users, auth_headers, make_part):
        with app.app_context():
            make_part(quantity=3)
            make_part(quantity=0, part_number="PN-5580-E", category="Avionics", unit_cost="2100.00")
            make_part(quantity=12, part_number="PN-7720-A", category="Hydraulics", unit_cost="4850.00")

            response = client.get("/api/reports/summary", headers=auth_headers(users[UserRole.VIEWER]))

            assert response.status_code == 200
            data = response.get_json()
            assert data["totalParts"] == 3
            assert data["totalQuantity"] == 15
            assert data["totalValue"] == 154200.0
            assert data["lowStockCount"] == 1
            assert data["outOfStockCount"] == 1
            assert [row["category"] for row in data["categories"]] == ["Avionics", "Hydraulics"]

    def test_reorder(self, app: Flask, client: FlaskClient, session: Session, users, auth_headers, make_part):
        with app.app_context():
            make_part(quantity=3)
            make_part(quantity=40, part_number="PN-9001-H")

            response = client.get("/api/reports/reorder", headers=auth_headers(users[UserRole.VIEWER]))

            assert response.status_code == 200
            data = response.get_json()
            assert len(data) == 1
            assert data[0]["part"]["partNumber"] == "PN-3305-C"
            assert data[0]["deficit"] == 1
            assert data[0]["deficitCost"] == 32000.0

    def test_shelf_life(self, app: Flask, client: FlaskClient, session: Session, users, auth_headers, make_part):
        with app.app_context():
            today = date.today()
            make_part(quantity=1, shelf_life=today - timedelta(days=10))
            make_part(quantity=1, part_number="PN-2210-F", shelf_life=today + timedelta(days=45))
            make_part(quantity=1, part_number="PN-9001-H", shelf_life=today + timedelta(days=400))

            response = client.get("/api/reports/shelf-life", headers=auth_headers(users[UserRole.ADMIN]))

            assert response.status_code == 200
            data = response.get_json()
            assert [row["part"]["partNumber"] for row in data["expired"]] == ["PN-3305-C"]
            assert [row["daysRemaining"] for row in data["expiring"]] == [45]

    def test_reports_require_token(self, app: Flask, client: FlaskClient, session: Session):
        with app.app_context():
            for path in ("/api/reports/summary", "/api/reports/reorder", "/api/reports/shelf-life"):
                assert client.get(path).status_code == 401
