"""Audit log schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.user import UserRole
from app.schemas.common import CAMEL_CASE_CONFIG


class AuditCreateSchema(BaseModel):
    """Schema for a client-reported audit entry."""
    model_config = CAMEL_CASE_CONFIG

    action: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "Exported inventory report"})
    user_id: int | None = Field(None, description="Must match the authenticated user")


class AuditEntryResponseSchema(BaseModel):
    """Schema for an audit log entry."""
    model_config = CAMEL_CASE_CONFIG

    id: int
    action: str = Field(..., json_schema_extra={"example": "Received 5× PN-3305-C — Ref: PO-2025-003"})
    date: datetime
    user_id: int
    user_name: str = Field(..., json_schema_extra={"example": "Jane Martinez"})
    role: UserRole
