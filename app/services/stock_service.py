"""Stock service coordinating ledger entries and part quantities."""

import logging
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, joinedload

from app.exceptions import (
    InsufficientStockException,
    ValidationFailedException,
)
from app.models.part import MAX_COLUMN_INTEGER, Part
from app.models.stock_transaction import MovementType, StockTransaction
from app.services.base import BaseService
from app.services.metrics_service import MetricsServiceProtocol
from app.services.part_service import PartService

logger = logging.getLogger(__name__)

OPENING_REFERENCE = "OPENING"
OPENING_NOTE = "Opening balance"


class StockService(BaseService):
    """Service class for recording stock movements.

    Every change to a part's quantity happens here, as one unit of work
    that appends the ledger entry and adjusts the quantity together. The
    unit either commits as a whole or is rolled back before the error
    propagates.
    """

    def __init__(
        self,
        db: Session,
        part_service: PartService,
        metrics_service: MetricsServiceProtocol,
    ):
        """Initialize service with database session and dependencies.

        Args:
            db: SQLAlchemy database session
            part_service: Instance of PartService
            metrics_service: Instance of MetricsService for recording metrics
        """
        super().__init__(db)
        self.part_service = part_service
        self.metrics_service = metrics_service

    def record_movement(
        self,
        part_id: int,
        movement_type: MovementType | str,
        quantity: int,
        reference: str | None,
        note: str | None,
        user_id: int,
    ) -> StockTransaction:
        """Record a receipt or issue against a part and commit it.

        Raises:
            ValidationFailedException: If the type or quantity is invalid
            RecordNotFoundException: If the part does not exist
            InsufficientStockException: If an issue exceeds the quantity on hand
        """
        movement_type = self._validate_movement(movement_type, quantity)

        try:
            transaction = self._apply_movement(part_id, movement_type, quantity, reference, note, user_id)
            self.db.commit()
        except InsufficientStockException:
            self.db.rollback()
            self.metrics_service.record_movement_rejected("insufficient_stock")
            raise
        except Exception:
            self.db.rollback()
            raise

        self.metrics_service.record_movement(movement_type.value, quantity)
        logger.info(
            "Recorded %s of %d for part %s (transaction %s)",
            movement_type.value, quantity, part_id, transaction.id,
        )
        return transaction

    def create_part_with_opening_stock(
        self,
        attrs: dict[str, Any],
        quantity: int,
        user_id: int,
    ) -> Part:
        """Create a part and book its opening quantity as a receipt, in one commit."""
        if not 0 <= quantity <= MAX_COLUMN_INTEGER:
            raise ValidationFailedException({"quantity": f"must be an integer between 0 and {MAX_COLUMN_INTEGER}"})

        try:
            part = self.part_service.create_part(**attrs)
            if quantity > 0:
                self._apply_movement(part.id, MovementType.IN, quantity, OPENING_REFERENCE, OPENING_NOTE, user_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if quantity > 0:
            self.metrics_service.record_movement(MovementType.IN.value, quantity)
        logger.info("Created part %s (%s) with opening quantity %d", part.id, part.part_number, quantity)
        return part

    def list_transactions(self, part_id: int | None = None) -> list[StockTransaction]:
        """List ledger entries newest first, optionally for a single part."""
        stmt = (
            select(StockTransaction)
            .options(joinedload(StockTransaction.user), joinedload(StockTransaction.part))
            .order_by(StockTransaction.id.desc())
        )
        if part_id is not None:
            stmt = stmt.where(StockTransaction.part_id == part_id)
        return list(self.db.execute(stmt).scalars().all())

    def ledger_balance(self, part_id: int) -> int:
        """Sum of receipts minus sum of issues recorded for a part."""
        stmt = select(func.coalesce(func.sum(self._signed_quantity()), 0)).where(
            StockTransaction.part_id == part_id
        )
        return int(self.db.execute(stmt).scalar() or 0)

    def verify_ledger(self) -> list[int]:
        """Return ids of parts whose quantity disagrees with their ledger."""
        balances = (
            select(
                StockTransaction.part_id,
                func.sum(self._signed_quantity()).label("balance"),
            )
            .group_by(StockTransaction.part_id)
            .subquery()
        )
        stmt = (
            select(Part.id)
            .outerjoin(balances, balances.c.part_id == Part.id)
            .where(Part.quantity != func.coalesce(balances.c.balance, 0))
            .order_by(Part.id)
        )
        mismatched = list(self.db.execute(stmt).scalars().all())
        if mismatched:
            logger.warning("Ledger mismatch for parts %s", mismatched)
        return mismatched

    def _apply_movement(
        self,
        part_id: int,
        movement_type: MovementType,
        quantity: int,
        reference: str | None,
        note: str | None,
        user_id: int,
    ) -> StockTransaction:
        # Row lock serializes concurrent movements on the same part
        part = self.part_service.get_part_for_update(part_id)

        if movement_type == MovementType.OUT and quantity > part.quantity:
            raise InsufficientStockException(part.part_number, quantity, part.quantity)

        transaction = StockTransaction(
            part_id=part.id,
            type=movement_type,
            quantity=quantity,
            reference=reference,
            note=note,
            user_id=user_id,
        )
        self.db.add(transaction)
        self.db.flush()

        delta = quantity if movement_type == MovementType.IN else -quantity
        self.part_service.adjust_quantity(part.id, delta)

        return transaction

    def _validate_movement(self, movement_type: MovementType | str, quantity: int) -> MovementType:
        errors: dict[str, str] = {}
        try:
            movement_type = MovementType(movement_type)
        except ValueError:
            errors["type"] = "must be IN or OUT"
        if not isinstance(quantity, int) or isinstance(quantity, bool) or not 1 <= quantity <= MAX_COLUMN_INTEGER:
            errors["quantity"] = f"must be an integer between 1 and {MAX_COLUMN_INTEGER}"
        if errors:
            raise ValidationFailedException(errors)
        return MovementType(movement_type)

    @staticmethod
    def _signed_quantity():
        return case(
            (StockTransaction.type == MovementType.IN, StockTransaction.quantity),
            else_=-StockTransaction.quantity,
        )
