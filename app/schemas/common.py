"""
Common response schemas for consistent API structure.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Request and response bodies use camelCase keys; Python code uses snake_case.
CAMEL_CASE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


class ErrorResponseSchema(BaseModel):
    """Standard error response format."""
    model_config = ConfigDict(from_attributes=True)

    error: str = Field(..., description="Error message", json_schema_extra={"example": "Validation failed"})
    code: str | None = Field(None, description="Machine-readable error code", json_schema_extra={"example": "INSUFFICIENT_STOCK"})
    details: Any | None = Field(None, description="Additional error details", json_schema_extra={"example": {"requested": 5, "available": 2}})


class SuccessResponseSchema(BaseModel):
    """Acknowledgement for operations without a response body."""
    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(..., description="Whether the operation was applied", json_schema_extra={"example": True})
