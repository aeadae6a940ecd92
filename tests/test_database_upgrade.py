"""Tests for database upgrade helpers."""

from sqlalchemy import inspect

from app.database import get_current_revision, get_pending_migrations, upgrade_database
from app.extensions import db


def test_inventory_tables_exist_after_upgrade(app):
    """All four relations are present after migrations run."""
    with app.app_context():
        tables = set(inspect(db.engine).get_table_names())

        assert {"users", "parts", "transactions", "audit_logs"}.issubset(tables)


def test_database_is_at_head(app):
    with app.app_context():
        assert get_current_revision() == "001"
        assert get_pending_migrations() == []


def test_upgrade_is_noop_when_current(app):
    with app.app_context():
        assert upgrade_database() == []


def test_recreate_reapplies_migrations(app):
    with app.app_context():
        applied = upgrade_database(recreate=True)

        assert [revision for revision, _ in applied] == ["001"]
        assert "parts" in inspect(db.engine).get_table_names()
