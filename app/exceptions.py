"""Domain-specific exceptions with user-ready messages for the inventory system."""

from enum import Enum


class BusinessLogicException(Exception):
    """Base exception class for business logic errors.

    All business logic exceptions include user-ready messages that can be
    displayed directly in the UI without client-side message construction.
    """

    def __init__(self, message: str, error_code: str) -> None:
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class RecordNotFoundException(BusinessLogicException):
    """Exception raised when a requested record is not found."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"{resource_type} {identifier} was not found"
        super().__init__(message, error_code="RECORD_NOT_FOUND")


class ResourceConflictException(BusinessLogicException):
    """Exception raised when attempting to create a resource that already exists."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"A {resource_type.lower()} with {identifier} already exists"
        super().__init__(message, error_code="RESOURCE_CONFLICT")


class InsufficientStockException(BusinessLogicException):
    """Exception raised when an issue would take a part's quantity below zero."""

    def __init__(self, part_number: str, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        message = f"Insufficient stock for {part_number} (requested {requested}, have {available})"
        super().__init__(message, error_code="INSUFFICIENT_STOCK")


class InvalidOperationException(BusinessLogicException):
    """Exception raised when an operation cannot be performed due to business rules."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cannot {operation} because {cause}"
        super().__init__(message, error_code="INVALID_OPERATION")


class ValidationFailedException(BusinessLogicException):
    """Exception raised when one or more fields fail domain validation."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = field_errors
        fields = ", ".join(sorted(field_errors))
        super().__init__(f"Validation failed for {fields}", error_code="VALIDATION_FAILED")


class AuthFailureReason(str, Enum):
    """Why a caller could not be authenticated."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_MISSING = "TOKEN_MISSING"
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"


_AUTH_MESSAGES = {
    AuthFailureReason.INVALID_CREDENTIALS: "Invalid credentials",
    AuthFailureReason.TOKEN_MISSING: "Access token required",
    AuthFailureReason.TOKEN_INVALID: "Invalid or expired token",
    AuthFailureReason.TOKEN_EXPIRED: "Invalid or expired token",
}


class AuthenticationException(BusinessLogicException):
    """Exception raised when the caller's identity cannot be established.

    The message is deliberately coarse; the reason is kept on the exception
    so callers and logs can still tell the cases apart.
    """

    def __init__(self, reason: AuthFailureReason) -> None:
        self.reason = reason
        super().__init__(_AUTH_MESSAGES[reason], error_code=reason.value)


class AuthorizationException(BusinessLogicException):
    """Exception raised when an authenticated identity may not perform an operation."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__("Unauthorized access", error_code="FORBIDDEN")
