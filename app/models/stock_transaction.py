"""Stock transaction (movement ledger) model for Aircraft Parts Inventory."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, String, Text, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db

if TYPE_CHECKING:
    from app.models.part import Part
    from app.models.user import User


class MovementType(str, Enum):
    """Direction of a stock movement."""

    IN = "IN"
    OUT = "OUT"


class StockTransaction(db.Model):  # type: ignore[name-defined]
    """Append-only ledger entry justifying a change to a part's quantity."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    part_id: Mapped[int] = mapped_column(
        ForeignKey("parts.id"), nullable=False, index=True
    )
    type: Mapped[MovementType] = mapped_column(
        SQLEnum(
            MovementType,
            name="movement_type",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
            native_enum=False,
            length=10,
        ),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(nullable=False)
    date: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), index=True
    )
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_transactions_quantity_positive"),
        CheckConstraint("type IN ('IN', 'OUT')", name="ck_transactions_type"),
    )

    part: Mapped[Part] = relationship("Part", back_populates="transactions", lazy="select")
    user: Mapped[User] = relationship("User", back_populates="transactions", lazy="select")

    @property
    def signed_quantity(self) -> int:
        """Quantity change applied to the part (negative for issues)."""
        return self.quantity if self.type == MovementType.IN else -self.quantity

    def __repr__(self) -> str:
        return f"<StockTransaction {self.part_id}: {self.signed_quantity:+d} @ {self.date}>"
