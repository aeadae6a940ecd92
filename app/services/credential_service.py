"""Credential service for user lookup and password verification."""

import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import (
    AuthenticationException,
    AuthFailureReason,
    RecordNotFoundException,
    ResourceConflictException,
    ValidationFailedException,
)
from app.models.user import User, UserRole
from app.services.base import BaseService
from app.services.metrics_service import MetricsServiceProtocol

logger = logging.getLogger(__name__)


class CredentialService(BaseService):
    """Service class for verifying and provisioning user credentials."""

    # Compared against when the username does not exist, so an unknown user
    # costs the same bcrypt work as a wrong password.
    _dummy_hashes: dict[int, bytes] = {}

    def __init__(self, db: Session, metrics_service: MetricsServiceProtocol, bcrypt_rounds: int = 12):
        """Initialize service with database session and dependencies.

        Args:
            db: SQLAlchemy database session
            metrics_service: Instance of MetricsService for recording login outcomes
            bcrypt_rounds: Cost factor for newly created password hashes
        """
        super().__init__(db)
        self.metrics_service = metrics_service
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Return a salted bcrypt hash for storage."""
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, username: str, password: str) -> User:
        """Return the user matching the credentials.

        Raises:
            AuthenticationException: With INVALID_CREDENTIALS for an unknown
                username and for a wrong password alike.
        """
        stmt = select(User).where(User.username == username)
        user = self.db.execute(stmt).scalar_one_or_none()

        if user is None:
            bcrypt.checkpw(password.encode("utf-8"), self._get_dummy_hash())
            raise self._rejection(username)

        if not self._check_password(password, user.password_hash):
            raise self._rejection(username)

        self.metrics_service.record_login("success")
        return user

    def get_user(self, user_id: int) -> User:
        """Get user by id."""
        user = self.db.get(User, user_id)
        if user is None:
            raise RecordNotFoundException("User", user_id)
        return user

    def create_user(self, username: str, password: str, name: str, role: UserRole) -> User:
        """Provision a new user with a hashed password."""
        errors: dict[str, str] = {}
        if not username.strip():
            errors["username"] = "must not be empty"
        if not name.strip():
            errors["name"] = "must not be empty"
        if not password:
            errors["password"] = "must not be empty"
        if errors:
            raise ValidationFailedException(errors)

        stmt = select(User.id).where(User.username == username)
        if self.db.execute(stmt).scalar_one_or_none() is not None:
            raise ResourceConflictException("User", f"username {username}")

        user = User(
            username=username.strip(),
            password_hash=self.hash_password(password),
            name=name.strip(),
            role=role,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def _rejection(self, username: str) -> AuthenticationException:
        logger.info("Rejected login for username %r", username)
        self.metrics_service.record_login("failure")
        return AuthenticationException(AuthFailureReason.INVALID_CREDENTIALS)

    def _check_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.warning("Unusable password hash on record; rejecting login")
            return False

    def _get_dummy_hash(self) -> bytes:
        dummy = self._dummy_hashes.get(self.bcrypt_rounds)
        if dummy is None:
            dummy = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=self.bcrypt_rounds))
            self._dummy_hashes[self.bcrypt_rounds] = dummy
        return dummy
