"""Part schemas for request/response validation."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.models.part import MAX_COLUMN_INTEGER, MAX_UNIT_COST, PartCondition, StockStatus
from app.schemas.common import CAMEL_CASE_CONFIG


class PartCreateSchema(BaseModel):
    """Schema for creating a new part.

    A non-zero ``quantity`` is booked as an opening receipt in the stock
    ledger rather than written to the part directly.
    """
    model_config = CAMEL_CASE_CONFIG

    part_number: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "PN-7201-A"})
    description: str = Field(..., min_length=1, json_schema_extra={"example": "Turbine Blade Assembly"})
    category: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "Engine"})
    manufacturer: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "Rolls-Royce"})
    serial_number: str | None = Field(None, max_length=100, json_schema_extra={"example": "SN-TR-90412"})
    batch_number: str | None = Field(None, max_length=100, json_schema_extra={"example": "BT-2025-001"})
    quantity: int = Field(0, ge=0, le=MAX_COLUMN_INTEGER, description="Opening quantity", json_schema_extra={"example": 12})
    reorder_point: int = Field(0, ge=0, le=MAX_COLUMN_INTEGER, json_schema_extra={"example": 5})
    location: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "Warehouse A"})
    condition: PartCondition = Field(..., json_schema_extra={"example": "New"})
    cert_of_conformance: str | None = Field(None, max_length=100, json_schema_extra={"example": "COC-RR-2025-0412"})
    shelf_life: date | None = Field(None, description="Expiry date", json_schema_extra={"example": "2028-06-15"})
    unit_cost: float = Field(0, ge=0, le=float(MAX_UNIT_COST), json_schema_extra={"example": 14500.0})


class PartUpdateSchema(BaseModel):
    """Schema for editing part attributes.

    Every field is optional; only the fields present are changed. The
    quantity is accepted for full-object edits but must equal the stored
    value.
    """
    model_config = CAMEL_CASE_CONFIG

    part_number: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1, max_length=50)
    manufacturer: str | None = Field(None, min_length=1, max_length=100)
    serial_number: str | None = Field(None, max_length=100)
    batch_number: str | None = Field(None, max_length=100)
    quantity: int | None = Field(None, ge=0, le=MAX_COLUMN_INTEGER, description="Must match the current quantity")
    reorder_point: int | None = Field(None, ge=0, le=MAX_COLUMN_INTEGER)
    location: str | None = Field(None, min_length=1, max_length=100)
    condition: PartCondition | None = None
    cert_of_conformance: str | None = Field(None, max_length=100)
    shelf_life: date | None = None
    unit_cost: float | None = Field(None, ge=0, le=float(MAX_UNIT_COST))


class PartResponseSchema(BaseModel):
    """Schema for part details."""
    model_config = CAMEL_CASE_CONFIG

    id: int = Field(..., json_schema_extra={"example": 1})
    part_number: str
    description: str
    category: str
    manufacturer: str
    serial_number: str | None
    batch_number: str | None
    quantity: int = Field(..., json_schema_extra={"example": 12})
    reorder_point: int
    location: str
    condition: PartCondition
    cert_of_conformance: str | None
    shelf_life: date | None
    unit_cost: float = Field(..., json_schema_extra={"example": 14500.0})
    stock_status: StockStatus = Field(..., json_schema_extra={"example": "In Stock"})
    total_value: float = Field(..., description="Quantity times unit cost", json_schema_extra={"example": 174000.0})
    created_at: datetime
    updated_at: datetime
