"""Inventory report schemas."""

from pydantic import BaseModel, Field

from app.schemas.common import CAMEL_CASE_CONFIG
from app.schemas.part import PartResponseSchema


class CategoryBreakdownSchema(BaseModel):
    """Totals for one part category."""
    model_config = CAMEL_CASE_CONFIG

    category: str = Field(..., json_schema_extra={"example": "Avionics"})
    parts: int
    quantity: int
    value: float


class InventorySummarySchema(BaseModel):
    """Aggregated inventory statistics."""
    model_config = CAMEL_CASE_CONFIG

    total_parts: int = Field(..., json_schema_extra={"example": 8})
    total_quantity: int = Field(..., json_schema_extra={"example": 571})
    total_value: float
    low_stock_count: int = Field(..., description="Parts in stock at or below their reorder point")
    out_of_stock_count: int
    quarantined_count: int
    expired_count: int
    expiring_count: int = Field(..., description="Parts expiring within 90 days")
    categories: list[CategoryBreakdownSchema]


class ReorderItemSchema(BaseModel):
    """A part at or below its reorder point."""
    model_config = CAMEL_CASE_CONFIG

    part: PartResponseSchema
    deficit: int = Field(..., description="Units needed to reach the reorder point")
    deficit_cost: float


class ShelfLifeItemSchema(BaseModel):
    """A part with an expiry date inside the report window."""
    model_config = CAMEL_CASE_CONFIG

    part: PartResponseSchema
    days_remaining: int


class ShelfLifeReportSchema(BaseModel):
    """Expired parts and parts expiring soon."""
    model_config = CAMEL_CASE_CONFIG

    expired: list[ShelfLifeItemSchema]
    expiring: list[ShelfLifeItemSchema]
