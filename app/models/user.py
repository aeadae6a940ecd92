"""User model for Aircraft Parts Inventory."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db

if TYPE_CHECKING:
    from app.models.audit_log import AuditLog
    from app.models.stock_transaction import StockTransaction


class UserRole(str, Enum):
    """Closed set of roles a user can hold."""

    ADMIN = "Admin"
    STOCK_CONTROLLER = "Stock Controller"
    VIEWER = "Viewer"


class User(db.Model):  # type: ignore[name-defined]
    """Model representing an operator who can sign in."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(
            UserRole,
            name="user_role",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
            native_enum=False,
            length=20,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )

    transactions: Mapped[list[StockTransaction]] = relationship(
        "StockTransaction", back_populates="user", lazy="select"
    )
    audit_logs: Mapped[list[AuditLog]] = relationship(
        "AuditLog", back_populates="user", lazy="select"
    )

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"
