"""Tests for CredentialService."""

from unittest.mock import patch

import bcrypt
import pytest
from flask import Flask
from sqlalchemy.orm import Session

from app.exceptions import (
    AuthenticationException,
    AuthFailureReason,
    RecordNotFoundException,
    ResourceConflictException,
    ValidationFailedException,
)
from app.models.user import UserRole
from app.services.container import ServiceContainer


class TestCredentialService:
    """Test cases for password verification and user provisioning."""

    def test_verify_returns_user_for_correct_password(self, app: Flask, session: Session, container: ServiceContainer, make_user):
        """A matching username and password yields the stored user."""
        with app.app_context():
            user = make_user(UserRole.STOCK_CONTROLLER, username="controller", name="Jane Martinez", password="ctrl1")

            verified = container.credential_service().verify("controller", "ctrl1")

            assert verified.id == user.id
            assert verified.role == UserRole.STOCK_CONTROLLER

    def test_wrong_password_and_unknown_user_are_indistinguishable(self, app: Flask, session: Session, container: ServiceContainer, make_user):
        """Both failure modes raise the same reason and message."""
        with app.app_context():
            make_user(UserRole.ADMIN, username="admin")
            service = container.credential_service()

            with pytest.raises(AuthenticationException) as wrong_password:
                service.verify("admin", "not-the-password")
            with pytest.raises(AuthenticationException) as unknown_user:
                service.verify("nobody", "not-the-password")

            assert wrong_password.value.reason == AuthFailureReason.INVALID_CREDENTIALS
            assert unknown_user.value.reason == AuthFailureReason.INVALID_CREDENTIALS
            assert wrong_password.value.message == unknown_user.value.message == "Invalid credentials"

    def test_unknown_user_still_checks_a_hash(self, app: Flask, session: Session, container: ServiceContainer):
        """An unknown username pays one bcrypt comparison like a known one."""
        with app.app_context():
            service = container.credential_service()

            with patch("app.services.credential_service.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
                with pytest.raises(AuthenticationException):
                    service.verify("ghost", "whatever")

            assert checkpw.call_count == 1

    def test_login_outcomes_are_counted(self, app: Flask, session: Session, container: ServiceContainer, make_user):
        """Successful and failed logins are reported to metrics."""
        with app.app_context():
            make_user(UserRole.VIEWER, username="viewer", password="view1")
            metrics_service = container.metrics_service()
            service = container.credential_service()

            with patch.object(metrics_service, "record_login") as record_login:
                service.verify("viewer", "view1")
                with pytest.raises(AuthenticationException):
                    service.verify("viewer", "nope")

            assert [call.args[0] for call in record_login.call_args_list] == ["success", "failure"]

    def test_password_is_stored_hashed(self, app: Flask, session: Session, container: ServiceContainer):
        """The stored value is a bcrypt hash of the password, not the password."""
        with app.app_context():
            user = container.credential_service().create_user("tom", "view1", "Tom Chen", UserRole.VIEWER)
            session.commit()

            assert user.password_hash != "view1"
            assert bcrypt.checkpw(b"view1", user.password_hash.encode("utf-8"))

    def test_unusable_stored_hash_is_rejected(self, app: Flask, session: Session, container: ServiceContainer, make_user):
        """A legacy plaintext value in the hash column never authenticates."""
        with app.app_context():
            user = make_user(UserRole.VIEWER, username="legacy")
            user.password_hash = "plaintext"
            session.commit()

            with pytest.raises(AuthenticationException):
                container.credential_service().verify("legacy", "plaintext")

    def test_create_user_rejects_duplicate_username(self, app: Flask, session: Session, container: ServiceContainer, make_user):
        """Usernames are unique."""
        with app.app_context():
            make_user(UserRole.VIEWER, username="viewer")

            with pytest.raises(ResourceConflictException):
                container.credential_service().create_user("viewer", "pw", "Someone", UserRole.ADMIN)

    def test_create_user_requires_fields(self, app: Flask, session: Session, container: ServiceContainer):
        """Empty username, name and password are reported together."""
        with app.app_context():
            with pytest.raises(ValidationFailedException) as exc_info:
                container.credential_service().create_user(" ", "", "", UserRole.VIEWER)

            assert set(exc_info.value.field_errors) == {"username", "name", "password"}

    def test_get_user_not_found(self, app: Flask, session: Session, container: ServiceContainer):
        """Looking up a missing user id raises RecordNotFoundException."""
        with app.app_context():
            with pytest.raises(RecordNotFoundException):
                container.credential_service().get_user(999)
