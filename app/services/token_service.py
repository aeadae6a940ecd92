"""Session token issuing and validation."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from app.config import Settings
from app.exceptions import AuthenticationException, AuthFailureReason
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Identity decoded from a valid session token."""

    user_id: int
    username: str
    role: UserRole


class TokenService:
    """Issues and validates self-contained, signed session tokens.

    Tokens are not revocable: a token stays valid until it expires, and
    validation never touches the database.
    """

    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(hours=settings.JWT_EXPIRY_HOURS)

    def issue(self, user: User, now: datetime | None = None) -> str:
        """Sign a token embedding the user's id, username and role."""
        issued_at = now or datetime.now(UTC)
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate(self, token: str | None) -> AuthenticatedIdentity:
        """Decode a token into an identity.

        Raises:
            AuthenticationException: TOKEN_MISSING, TOKEN_EXPIRED or TOKEN_INVALID
        """
        if not token:
            raise AuthenticationException(AuthFailureReason.TOKEN_MISSING)

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationException(AuthFailureReason.TOKEN_EXPIRED) from e
        except jwt.InvalidTokenError as e:
            logger.info("Rejected session token: %s", e)
            raise AuthenticationException(AuthFailureReason.TOKEN_INVALID) from e

        try:
            return AuthenticatedIdentity(
                user_id=int(payload["sub"]),
                username=str(payload["username"]),
                role=UserRole(payload["role"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.info("Rejected session token with malformed claims")
            raise AuthenticationException(AuthFailureReason.TOKEN_INVALID) from e

    @staticmethod
    def parse_bearer(header_value: str | None) -> str | None:
        """Extract the token from an ``Authorization: Bearer <token>`` header."""
        if not header_value or not header_value.startswith(BEARER_PREFIX):
            return None
        token = header_value[len(BEARER_PREFIX):].strip()
        return token or None
