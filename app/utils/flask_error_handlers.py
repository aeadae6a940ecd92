"""Flask application error handlers."""

import logging

from flask import Flask
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from app.exceptions import AuthenticationException, AuthorizationException
from app.utils.error_handling import (
    auth_error_response,
    error_response,
    integrity_error_response,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Register Flask error handlers for exceptions raised outside view bodies."""

    @app.errorhandler(AuthenticationException)
    def handle_authentication_error(error: AuthenticationException):
        """Handle missing, invalid or expired session tokens."""
        logger.info("Authentication failed: %s", error.reason.value)
        return auth_error_response(error)

    @app.errorhandler(AuthorizationException)
    def handle_authorization_error(error: AuthorizationException):
        """Handle authenticated callers without the required role."""
        return auth_error_response(error)

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """Handle Pydantic validation errors."""
        error_details = []
        for err in error.errors():
            field = ".".join(str(x) for x in err["loc"])
            error_details.append({"message": err["msg"], "field": field})

        return error_response("Validation failed", error_details, 400, "VALIDATION_FAILED")

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        """Handle database integrity constraint violations."""
        return integrity_error_response(error)

    @app.errorhandler(404)
    def handle_not_found(error):
        """Handle 404 Not Found errors."""
        return error_response(
            "Resource not found", {"message": "The requested resource could not be found"}, 404
        )

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        return error_response(
            "Method not allowed", {"message": "The HTTP method is not allowed for this endpoint"}, 405
        )

    @app.errorhandler(500)
    def handle_internal_server_error(error):
        """Handle 500 Internal Server Error."""
        return error_response(
            "Internal server error", {"message": "An unexpected error occurred"}, 500
        )
