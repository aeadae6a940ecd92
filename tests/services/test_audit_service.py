"""Tests for AuditService."""

from unittest.mock import patch

from flask import Flask
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.models.stock_transaction import MovementType
from app.models.user import UserRole
from app.services.audit_service import AuditActions
from app.services.container import ServiceContainer


class TestAuditActions:
    """Test the fixed action texts."""

    def test_movement_texts(self):
        assert AuditActions.movement(MovementType.IN, 5, "PN-3305-C", "PO-88") == "Received 5× PN-3305-C — Ref: PO-88"
        assert AuditActions.movement(MovementType.OUT, 2, "PN-3305-C", None) == "Issued 2× PN-3305-C — Ref: N/A"

    def test_part_texts(self):
        assert AuditActions.part_added("PN-7720-A") == "Added new part PN-7720-A"
        assert AuditActions.part_updated("PN-7720-A") == "Updated part PN-7720-A"


class TestAuditService:
    """Test cases for AuditService."""

    def test_record_and_list(self, app: Flask, session: Session, container: ServiceContainer, users):
        """Entries come back newest first with their user attached."""
        with app.app_context():
            admin = users[UserRole.ADMIN]
            viewer = users[UserRole.VIEWER]
            service = container.audit_service()

            first = service.record(AuditActions.LOGGED_IN, admin.id)
            second = service.record(AuditActions.LOGGED_IN, viewer.id)

            entries = service.list_entries()

            assert [entry.id for entry in entries] == [second.id, first.id]
            assert entries[0].user.name == viewer.name
            assert entries[0].user.role == UserRole.VIEWER
            assert entries[1].action == "Logged in"
            assert entries[1].date is not None

    def test_failed_write_is_not_propagated(self, app: Flask, session: Session, container: ServiceContainer, users):
        """A storage failure while auditing returns None and is counted."""
        with app.app_context():
            admin_id = users[UserRole.ADMIN].id
            service = container.audit_service()

            failure = OperationalError("INSERT INTO audit_logs", {}, Exception("database is locked"))
            with patch.object(session, "commit", side_effect=failure), \
                    patch.object(service.metrics_service, "record_audit_write_failure") as record_failure:
                result = service.record(AuditActions.LOGGED_OUT, admin_id)

            assert result is None
            record_failure.assert_called_once_with()
            assert session.execute(select(func.count()).select_from(AuditLog)).scalar_one() == 0

    def test_entries_are_appended_not_replaced(self, app: Flask, session: Session, container: ServiceContainer, users):
        with app.app_context():
            service = container.audit_service()
            user_id = users[UserRole.STOCK_CONTROLLER].id

            for _ in range(3):
                service.record(AuditActions.LOGGED_IN, user_id)

            assert len(service.list_entries()) == 3
