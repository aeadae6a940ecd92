"""Audit service for recording administrative actions."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models.audit_log import AuditLog
from app.models.stock_transaction import MovementType
from app.services.base import BaseService
from app.services.metrics_service import MetricsServiceProtocol

logger = logging.getLogger(__name__)


class AuditActions:
    """Fixed, human-readable audit action templates."""

    LOGGED_IN = "Logged in"
    LOGGED_OUT = "Logged out"

    @staticmethod
    def part_added(part_number: str) -> str:
        return f"Added new part {part_number}"

    @staticmethod
    def part_updated(part_number: str) -> str:
        return f"Updated part {part_number}"

    @staticmethod
    def movement(movement_type: MovementType, quantity: int, part_number: str, reference: str | None) -> str:
        verb = "Received" if movement_type == MovementType.IN else "Issued"
        return f"{verb} {quantity}× {part_number} — Ref: {reference or 'N/A'}"


class AuditService(BaseService):
    """Service class for the append-only audit log.

    Audit writes are best-effort: they run in their own commit after the
    action they describe has been committed, and a failed write is logged
    and counted rather than propagated.
    """

    def __init__(self, db: Session, metrics_service: MetricsServiceProtocol):
        """Initialize service with database session and dependencies.

        Args:
            db: SQLAlchemy database session
            metrics_service: Instance of MetricsService for counting failed writes
        """
        super().__init__(db)
        self.metrics_service = metrics_service

    def record(self, action: str, user_id: int) -> AuditLog | None:
        """Append and commit one audit entry.

        Returns:
            The stored entry, or None when the write failed
        """
        entry = AuditLog(action=action, user_id=user_id)
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to write audit entry %r for user %s", action, user_id)
            self.metrics_service.record_audit_write_failure()
            return None

        return entry

    def list_entries(self) -> list[AuditLog]:
        """List audit entries, newest first, with the acting user loaded."""
        stmt = (
            select(AuditLog)
            .options(joinedload(AuditLog.user))
            .order_by(AuditLog.date.desc(), AuditLog.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
