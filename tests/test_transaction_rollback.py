"""Tests for the request-level rollback mechanism.

The @handle_api_errors decorator turns exceptions into HTTP responses, so it
flags the request session for rollback and the teardown handler honours the
flag.
"""

from flask import Flask
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.exceptions import InsufficientStockException, RecordNotFoundException
from app.models.audit_log import AuditLog
from app.models.part import Part
from app.models.user import UserRole
from app.services.container import ServiceContainer
from app.utils.error_handling import handle_api_errors


class TestTransactionRollbackMechanism:
    """Test the core rollback mechanism with different exception types."""

    def test_validation_error_triggers_rollback(self, app: Flask, session: Session, container: ServiceContainer):
        @handle_api_errors
        def failing_function():
            raise ValidationError.from_exception_data("TestError", [])

        with app.app_context():
            db_session = container.db_session()
            db_session.info.pop('needs_rollback', None)

            _, status_code = failing_function()

            assert db_session.info.get('needs_rollback') is True
            assert status_code == 400

    def test_integrity_error_triggers_rollback(self, app: Flask, session: Session, container: ServiceContainer):
        @handle_api_errors
        def failing_function():
            raise IntegrityError("UNIQUE constraint failed", None, Exception("UNIQUE constraint failed: users.username"))

        with app.app_context():
            db_session = container.db_session()
            db_session.info.pop('needs_rollback', None)

            _, status_code = failing_function()

            assert db_session.info.get('needs_rollback') is True
            assert status_code == 409

    def test_domain_exception_triggers_rollback(self, app: Flask, session: Session, container: ServiceContainer):
        @handle_api_errors
        def failing_function():
            raise RecordNotFoundException("Part", 42)

        with app.app_context():
            db_session = container.db_session()
            db_session.info.pop('needs_rollback', None)

            _, status_code = failing_function()

            assert db_session.info.get('needs_rollback') is True
            assert status_code == 404

    def test_successful_operation_no_rollback_flag(self, app: Flask, session: Session, container: ServiceContainer):
        @handle_api_errors
        def successful_function():
            return {"success": True}, 200

        with app.app_context():
            db_session = container.db_session()
            db_session.info.pop('needs_rollback', None)

            _, status_code = successful_function()

            assert not db_session.info.get('needs_rollback')
            assert status_code == 200


class TestRollbackIntegration:
    """Integration tests verifying rollback with real requests."""

    def test_rejected_movement_leaves_no_audit_or_ledger_entry(self, app: Flask, client, session: Session,
                                                                 users, auth_headers, make_part):
        with app.app_context():
            part_id = make_part(quantity=1).id

            response = client.post(
                "/api/transactions",
                json={"partId": part_id, "type": "OUT", "quantity": 2},
                headers=auth_headers(users[UserRole.ADMIN]),
            )

            assert response.status_code == 400
            assert session.execute(select(func.count()).select_from(AuditLog)).scalar_one() == 0
            assert session.get(Part, part_id).quantity == 1

    def test_storage_failure_maps_to_503(self, app: Flask, client, session: Session, container: ServiceContainer,
                                         users, auth_headers, make_part, monkeypatch):
        """A storage error during a movement is reported as retryable and nothing is applied."""
        with app.app_context():
            part_id = make_part(quantity=5).id

            def broken_adjust(self, part_id, delta):
                raise OperationalError("UPDATE parts", {}, Exception("database is locked"))

            from app.services.part_service import PartService
            monkeypatch.setattr(PartService, "adjust_quantity", broken_adjust)

            response = client.post(
                "/api/transactions",
                json={"partId": part_id, "type": "OUT", "quantity": 2},
                headers=auth_headers(users[UserRole.ADMIN]),
            )

            assert response.status_code == 503
            assert response.get_json()["code"] == "STORAGE_FAILURE"
            assert session.get(Part, part_id).quantity == 5
            assert session.execute(select(func.count()).select_from(AuditLog)).scalar_one() == 0

    def test_session_usable_after_failed_request(self, app: Flask, client, session: Session, container: ServiceContainer,
                                                 users, auth_headers, make_part):
        """A failed request does not poison the next one."""
        with app.app_context():
            part_id = make_part(quantity=0).id
            headers = auth_headers(users[UserRole.ADMIN])

            failed = client.post("/api/transactions", json={"partId": part_id, "type": "OUT", "quantity": 1}, headers=headers)
            succeeded = client.post("/api/transactions", json={"partId": part_id, "type": "IN", "quantity": 4}, headers=headers)

            assert failed.status_code == 400
            assert succeeded.status_code == 200
            assert session.get(Part, part_id).quantity == 4


class TestErrorHandlerRobustness:
    """Test that the error handler itself is robust."""

    def test_error_handler_with_invalid_container(self, app: Flask):
        @handle_api_errors
        def failing_function():
            raise InsufficientStockException("PN-1", 2, 1)

        with app.app_context():
            original_container = app.container
            del app.container
            try:
                _, status_code = failing_function()
                assert status_code == 400
            finally:
                app.container = original_container

    def test_unexpected_error_is_500(self, app: Flask, session: Session, container: ServiceContainer):
        @handle_api_errors
        def failing_function():
            raise RuntimeError("boom")

        with app.app_context():
            response, status_code = failing_function()

            assert status_code == 500
            assert response.get_json()["code"] == "INTERNAL_ERROR"
