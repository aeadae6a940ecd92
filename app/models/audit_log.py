"""Audit log model for Aircraft Parts Inventory."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db

if TYPE_CHECKING:
    from app.models.user import User


class AuditLog(db.Model):  # type: ignore[name-defined]
    """Immutable record of an administrative action."""

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    user: Mapped[User] = relationship("User", back_populates="audit_logs", lazy="select")

    def __repr__(self) -> str:
        return f"<AuditLog {self.user_id}: {self.action!r} @ {self.date}>"
