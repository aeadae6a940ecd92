"""Stock transaction schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.part import MAX_COLUMN_INTEGER
from app.models.stock_transaction import MovementType
from app.schemas.common import CAMEL_CASE_CONFIG


class TransactionCreateSchema(BaseModel):
    """Schema for recording a stock movement.

    The timestamp is assigned by the server. ``userId`` is optional; when
    given it must be the caller's own id.
    """
    model_config = CAMEL_CASE_CONFIG

    part_id: int = Field(..., gt=0, le=MAX_COLUMN_INTEGER, json_schema_extra={"example": 2})
    type: MovementType = Field(..., json_schema_extra={"example": "IN"})
    quantity: int = Field(..., ge=1, le=MAX_COLUMN_INTEGER, json_schema_extra={"example": 5})
    reference: str | None = Field(None, max_length=100, json_schema_extra={"example": "PO-2025-003"})
    note: str | None = Field(None, json_schema_extra={"example": "Replenishment order"})
    user_id: int | None = Field(None, description="Must match the authenticated user")


class TransactionListQuerySchema(BaseModel):
    """Query parameters for listing the ledger."""
    model_config = CAMEL_CASE_CONFIG

    part_id: int | None = Field(None, gt=0, le=MAX_COLUMN_INTEGER, description="Only entries for this part")


class TransactionResponseSchema(BaseModel):
    """Schema for a ledger entry."""
    model_config = CAMEL_CASE_CONFIG

    id: int = Field(..., json_schema_extra={"example": 1})
    part_id: int
    part_number: str = Field(..., json_schema_extra={"example": "PN-3305-C"})
    type: MovementType
    quantity: int
    date: datetime
    reference: str | None
    note: str | None
    user_id: int
    user_name: str = Field(..., json_schema_extra={"example": "Jane Martinez"})
