"""Role-based authorization for API views."""

import functools
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from flask import current_app, request

from app.exceptions import AuthorizationException
from app.models.user import UserRole
from app.services.token_service import AuthenticatedIdentity

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Operations guarded by role checks."""

    READ_CATALOG = "read_catalog"
    WRITE_CATALOG = "write_catalog"
    RECORD_MOVEMENT = "record_movement"
    READ_AUDIT = "read_audit"
    WRITE_AUDIT = "write_audit"


ALL_ROLES = frozenset(UserRole)

ROLE_POLICY: dict[Capability, frozenset[UserRole]] = {
    Capability.READ_CATALOG: ALL_ROLES,
    Capability.WRITE_CATALOG: frozenset({UserRole.ADMIN, UserRole.STOCK_CONTROLLER}),
    Capability.RECORD_MOVEMENT: frozenset({UserRole.ADMIN, UserRole.STOCK_CONTROLLER}),
    Capability.READ_AUDIT: frozenset({UserRole.ADMIN}),
    Capability.WRITE_AUDIT: ALL_ROLES,
}


def authorize(identity: AuthenticatedIdentity, capability: Capability) -> None:
    """Raise AuthorizationException unless the identity's role grants the capability."""
    if identity.role not in ROLE_POLICY[capability]:
        logger.info(
            "Denied %s to user %s with role %s",
            capability.value, identity.user_id, identity.role.value,
        )
        raise AuthorizationException(capability.value)


def authenticate_request() -> AuthenticatedIdentity:
    """Validate the bearer token of the current request."""
    token_service = current_app.container.token_service()
    token = token_service.parse_bearer(request.headers.get("Authorization"))
    return token_service.validate(token)


def require_capability(capability: Capability | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator requiring a valid session token and, optionally, a capability.

    The validated identity is passed to the view as the ``identity`` keyword
    argument. Place it above ``api.validate`` so callers are rejected before
    their payload is looked at.
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            identity = authenticate_request()
            if capability is not None:
                authorize(identity, capability)
            return func(*args, identity=identity, **kwargs)

        return wrapper

    return decorator
