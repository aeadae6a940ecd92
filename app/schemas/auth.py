"""Authentication schemas for request/response validation."""

from pydantic import BaseModel, Field

from app.models.user import UserRole
from app.schemas.common import CAMEL_CASE_CONFIG


class LoginRequestSchema(BaseModel):
    """Schema for a username/password login."""
    model_config = CAMEL_CASE_CONFIG

    username: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "controller"})
    password: str = Field(..., min_length=1, json_schema_extra={"example": "ctrl1"})


class UserResponseSchema(BaseModel):
    """Public view of a user; never includes the password hash."""
    model_config = CAMEL_CASE_CONFIG

    id: int = Field(..., json_schema_extra={"example": 2})
    username: str = Field(..., json_schema_extra={"example": "controller"})
    name: str = Field(..., json_schema_extra={"example": "Jane Martinez"})
    role: UserRole = Field(..., json_schema_extra={"example": "Stock Controller"})


class LoginResponseSchema(BaseModel):
    """Schema for a successful login."""
    model_config = CAMEL_CASE_CONFIG

    token: str = Field(..., description="Bearer token valid for the configured session lifetime")
    user: UserResponseSchema


class IdentityResponseSchema(BaseModel):
    """Identity carried by the caller's session token."""
    model_config = CAMEL_CASE_CONFIG

    user_id: int = Field(..., json_schema_extra={"example": 2})
    username: str = Field(..., json_schema_extra={"example": "controller"})
    role: UserRole = Field(..., json_schema_extra={"example": "Stock Controller"})
