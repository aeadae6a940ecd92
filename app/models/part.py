"""Part model for Aircraft Parts Inventory."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Numeric, String, Text, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db

if TYPE_CHECKING:
    from app.models.stock_transaction import StockTransaction

# Integer columns are 32-bit; unit_cost is Numeric(10, 2)
MAX_COLUMN_INTEGER = 2_147_483_647
MAX_UNIT_COST = Decimal("99999999.99")


class PartCondition(str, Enum):
    """Airworthiness condition of the stocked items."""

    NEW = "New"
    SERVICEABLE = "Serviceable"
    UNSERVICEABLE = "Unserviceable"
    QUARANTINED = "Quarantined"


class StockStatus(str, Enum):
    """Stock level classification relative to the reorder point."""

    OUT_OF_STOCK = "Out of Stock"
    LOW = "Low"
    IN_STOCK = "In Stock"


class Part(db.Model):  # type: ignore[name-defined]
    """Model representing one kind or batch of physical inventory.

    ``quantity`` is owned by the stock ledger: it only changes through
    recorded movements, never through attribute edits.
    """

    __tablename__ = "parts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    part_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    manufacturer: Mapped[str] = mapped_column(String(100), nullable=False)
    serial_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    quantity: Mapped[int] = mapped_column(nullable=False, default=0, server_default="0")
    reorder_point: Mapped[int] = mapped_column(nullable=False, default=0, server_default="0")
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    condition: Mapped[PartCondition] = mapped_column(
        SQLEnum(
            PartCondition,
            name="part_condition",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
            native_enum=False,
            length=50,
        ),
        nullable=False,
    )
    cert_of_conformance: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shelf_life: Mapped[date | None] = mapped_column(nullable=True)
    unit_cost: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00"), server_default="0"
    )
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_parts_quantity_non_negative"),
        CheckConstraint("reorder_point >= 0", name="ck_parts_reorder_point_non_negative"),
        CheckConstraint("unit_cost >= 0", name="ck_parts_unit_cost_non_negative"),
    )

    transactions: Mapped[list[StockTransaction]] = relationship(
        "StockTransaction", back_populates="part", lazy="select"
    )

    @property
    def stock_status(self) -> StockStatus:
        if self.quantity == 0:
            return StockStatus.OUT_OF_STOCK
        if self.quantity <= self.reorder_point:
            return StockStatus.LOW
        return StockStatus.IN_STOCK

    @property
    def total_value(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.unit_cost)

    def __repr__(self) -> str:
        return f"<Part {self.part_number}: {self.quantity} @ {self.location}>"
