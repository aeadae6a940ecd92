"""Tests for TokenService."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt
import pytest

from app.config import Settings
from app.exceptions import AuthenticationException, AuthFailureReason
from app.models.user import UserRole
from app.services.token_service import AuthenticatedIdentity, TokenService


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(Settings(JWT_SECRET="unit-test-secret", JWT_EXPIRY_HOURS=8))


@pytest.fixture
def controller():
    return SimpleNamespace(id=2, username="controller", role=UserRole.STOCK_CONTROLLER)


class TestTokenService:
    """Test cases for issuing and validating session tokens."""

    def test_issue_and_validate(self, token_service: TokenService, controller):
        """A freshly issued token decodes to the user's identity."""
        token = token_service.issue(controller)

        identity = token_service.validate(token)

        assert identity == AuthenticatedIdentity(
            user_id=2, username="controller", role=UserRole.STOCK_CONTROLLER
        )

    def test_token_expires_after_configured_lifetime(self, token_service: TokenService, controller):
        """Tokens carry an expiry eight hours after issue."""
        issued_at = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)
        token = token_service.issue(controller, now=issued_at)

        claims = jwt.decode(token, options={"verify_signature": False})

        assert claims["exp"] - claims["iat"] == 8 * 3600
        assert claims["role"] == "Stock Controller"
        assert claims["sub"] == "2"

    def test_expired_token(self, token_service: TokenService, controller):
        """An expired token is rejected with TOKEN_EXPIRED."""
        token = token_service.issue(controller, now=datetime.now(UTC) - timedelta(hours=9))

        with pytest.raises(AuthenticationException) as exc_info:
            token_service.validate(token)

        assert exc_info.value.reason == AuthFailureReason.TOKEN_EXPIRED

    def test_missing_token(self, token_service: TokenService):
        """No token at all is TOKEN_MISSING."""
        with pytest.raises(AuthenticationException) as exc_info:
            token_service.validate(None)

        assert exc_info.value.reason == AuthFailureReason.TOKEN_MISSING
        assert exc_info.value.message == "Access token required"

    def test_token_signed_with_other_key(self, token_service: TokenService, controller):
        """A token signed with a different key is TOKEN_INVALID."""
        other = TokenService(Settings(JWT_SECRET="someone-elses-secret"))
        token = other.issue(controller)

        with pytest.raises(AuthenticationException) as exc_info:
            token_service.validate(token)

        assert exc_info.value.reason == AuthFailureReason.TOKEN_INVALID

    def test_garbage_token(self, token_service: TokenService):
        """A malformed token is TOKEN_INVALID."""
        with pytest.raises(AuthenticationException) as exc_info:
            token_service.validate("not.a.token")

        assert exc_info.value.reason == AuthFailureReason.TOKEN_INVALID

    def test_unknown_role_claim(self, token_service: TokenService):
        """A correctly signed token naming an unknown role is TOKEN_INVALID."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "username": "x", "role": "Superuser", "iat": now, "exp": now + timedelta(hours=1)},
            "unit-test-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationException) as exc_info:
            token_service.validate(token)

        assert exc_info.value.reason == AuthFailureReason.TOKEN_INVALID

    def test_token_without_expiry(self, token_service: TokenService):
        """Tokens must carry an expiry claim."""
        token = jwt.encode(
            {"sub": "1", "username": "x", "role": "Admin", "iat": datetime.now(UTC)},
            "unit-test-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationException) as exc_info:
            token_service.validate(token)

        assert exc_info.value.reason == AuthFailureReason.TOKEN_INVALID

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("Bearer ", None),
            ("Basic dXNlcjpwdw==", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_bearer(self, header, expected):
        """Only well-formed bearer headers yield a token."""
        assert TokenService.parse_bearer(header) == expected
