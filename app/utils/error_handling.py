"""Centralized error handling utilities."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from flask import current_app, jsonify
from flask.wrappers import Response
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import BadRequest

from app.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BusinessLogicException,
    InsufficientStockException,
    InvalidOperationException,
    RecordNotFoundException,
    ResourceConflictException,
    ValidationFailedException,
)
from app.utils import get_current_correlation_id

logger = logging.getLogger(__name__)


def error_response(
    error: str, details: Any, status: int, code: str | None = None
) -> tuple[Response, int]:
    """Build the JSON error body shared by all error paths."""
    body: dict[str, Any] = {"error": error, "details": details}
    if code is not None:
        body["code"] = code
    return jsonify(body), status


def auth_error_response(e: AuthenticationException | AuthorizationException) -> tuple[Response, int]:
    """Map an authentication or authorization failure to 401 or 403."""
    if isinstance(e, AuthorizationException):
        return error_response(
            e.message, {"message": "Your role does not permit this operation"}, 403, e.error_code
        )
    return error_response(
        e.message, {"message": "Sign in again to continue"}, 401, e.error_code
    )


def _mark_session_for_rollback() -> None:
    try:
        db_session = current_app.container.db_session()
        db_session.info['needs_rollback'] = True
    except Exception:
        logger.exception("Could not flag the request session for rollback")


def handle_api_errors(func: Callable[..., Any]) -> Callable[..., Response | tuple[Response | str, int]]:
    """Decorator to handle common API errors consistently.

    Maps domain exceptions, validation errors and storage errors to HTTP
    status codes and error bodies, and flags the request session so the
    teardown handler rolls it back.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            _mark_session_for_rollback()
            return _map_exception(e)

    return wrapper


def _map_exception(e: Exception) -> tuple[Response, int]:
    if isinstance(e, BadRequest):
        # JSON parsing errors from request.get_json()
        return error_response("Invalid JSON", {"message": "Request body must be valid JSON"}, 400)

    if isinstance(e, ValidationError):
        # Pydantic validation errors
        error_details = []
        for error in e.errors():
            field = ".".join(str(x) for x in error["loc"])
            error_details.append({"message": error["msg"], "field": field})
        return error_response("Validation failed", error_details, 400, "VALIDATION_FAILED")

    if isinstance(e, (AuthenticationException, AuthorizationException)):
        return auth_error_response(e)

    if isinstance(e, ValidationFailedException):
        error_details = [
            {"message": message, "field": field}
            for field, message in sorted(e.field_errors.items())
        ]
        return error_response(e.message, error_details, 400, e.error_code)

    if isinstance(e, InsufficientStockException):
        return error_response(
            e.message,
            {"requested": e.requested, "available": e.available},
            400,
            e.error_code,
        )

    if isinstance(e, RecordNotFoundException):
        return error_response(
            e.message, {"message": "The requested resource could not be found"}, 404, e.error_code
        )

    if isinstance(e, ResourceConflictException):
        return error_response(
            e.message, {"message": "A resource with those details already exists"}, 409, e.error_code
        )

    if isinstance(e, InvalidOperationException):
        return error_response(
            e.message, {"message": "The requested operation cannot be performed"}, 409, e.error_code
        )

    if isinstance(e, BusinessLogicException):
        # Fallback for domain exceptions without a dedicated mapping
        return error_response(
            e.message, {"message": "An inventory operation failed"}, 400, e.error_code
        )

    if isinstance(e, IntegrityError):
        return integrity_error_response(e)

    if isinstance(e, SQLAlchemyError):
        logger.exception("Storage failure (correlation id %s)", get_current_correlation_id())
        return error_response(
            "Storage temporarily unavailable",
            {"message": "The operation was not applied; please retry"},
            503,
            "STORAGE_FAILURE",
        )

    logger.exception("Unhandled error (correlation id %s)", get_current_correlation_id())
    return error_response(
        "Internal server error", {"message": "An unexpected error occurred"}, 500, "INTERNAL_ERROR"
    )


def integrity_error_response(e: IntegrityError) -> tuple[Response, int]:
    """Map database constraint violations to user-friendly messages."""
    error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)
    logger.warning("Constraint violation: %s", error_msg)

    if "UNIQUE constraint failed" in error_msg or "duplicate key" in error_msg.lower():
        return error_response(
            "Resource already exists", {"message": "A record with these values already exists"}, 409
        )
    elif "FOREIGN KEY constraint failed" in error_msg or "foreign key" in error_msg.lower():
        return error_response(
            "Invalid reference", {"message": "Referenced resource does not exist"}, 400
        )
    elif "NOT NULL constraint failed" in error_msg or "null value" in error_msg.lower():
        return error_response(
            "Missing required field", {"message": "Required field cannot be empty"}, 400
        )
    else:
        return error_response(
            "Database constraint violation", {"message": "The operation violates a database constraint"}, 400
        )
