"""Part service for managing the aircraft parts catalog."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import (
    InsufficientStockException,
    InvalidOperationException,
    RecordNotFoundException,
    ValidationFailedException,
)
from app.models.part import MAX_COLUMN_INTEGER, MAX_UNIT_COST, Part, PartCondition
from app.services.base import BaseService

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = (
    "part_number",
    "description",
    "category",
    "manufacturer",
    "location",
)
OPTIONAL_TEXT_FIELDS = ("serial_number", "batch_number", "cert_of_conformance")
EDITABLE_FIELDS = (
    *REQUIRED_TEXT_FIELDS,
    *OPTIONAL_TEXT_FIELDS,
    "condition",
    "reorder_point",
    "shelf_life",
    "unit_cost",
)


class PartService(BaseService):
    """Service class for part catalog operations.

    A part's quantity is never written through attribute edits. It only moves
    through ``adjust_quantity``, which the stock service calls inside the same
    unit of work as the ledger append.
    """

    def get_part(self, part_id: int) -> Part:
        """Get part by id."""
        part = self.db.get(Part, part_id) if 0 < part_id <= MAX_COLUMN_INTEGER else None
        if part is None:
            raise RecordNotFoundException("Part", part_id)
        return part

    def get_part_for_update(self, part_id: int) -> Part:
        """Get part by id, locking its row until the current transaction ends."""
        if not 0 < part_id <= MAX_COLUMN_INTEGER:
            raise RecordNotFoundException("Part", part_id)
        stmt = (
            select(Part)
            .where(Part.id == part_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        part = self.db.execute(stmt).scalar_one_or_none()
        if part is None:
            raise RecordNotFoundException("Part", part_id)
        return part

    def list_parts(self) -> list[Part]:
        """List all parts ordered by id."""
        stmt = select(Part).order_by(Part.id)
        return list(self.db.execute(stmt).scalars().all())

    def create_part(
        self,
        part_number: str,
        description: str,
        category: str,
        manufacturer: str,
        location: str,
        condition: PartCondition | str,
        reorder_point: int = 0,
        unit_cost: Decimal | float | int = Decimal("0"),
        serial_number: str | None = None,
        batch_number: str | None = None,
        cert_of_conformance: str | None = None,
        shelf_life: date | None = None,
    ) -> Part:
        """Create a new part with zero quantity.

        Opening stock is booked through the stock service so that the part's
        quantity is backed by a ledger entry from the start.
        """
        attrs = self._clean_attributes(
            {
                "part_number": part_number,
                "description": description,
                "category": category,
                "manufacturer": manufacturer,
                "location": location,
                "condition": condition,
                "reorder_point": reorder_point,
                "unit_cost": unit_cost,
                "serial_number": serial_number,
                "batch_number": batch_number,
                "cert_of_conformance": cert_of_conformance,
                "shelf_life": shelf_life,
            },
            require_all=True,
        )

        part = Part(quantity=0, **attrs)
        self.db.add(part)
        self.db.flush()  # Get the ID immediately
        return part

    def update_part(self, part_id: int, quantity: int | None = None, **changes: Any) -> Part:
        """Update part attributes and commit the edit.

        Only keys present in ``changes`` are written. ``quantity`` may be sent
        along with a full-object edit, but it must match the stored value.

        Raises:
            RecordNotFoundException: If the part does not exist
            InvalidOperationException: If the edit would change the quantity
            ValidationFailedException: If a field fails validation
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailedException({name: "is not an editable field" for name in unknown})

        part = self.get_part(part_id)

        if quantity is not None and quantity != part.quantity:
            raise InvalidOperationException(
                f"change quantity of part {part.part_number}",
                "quantity only changes through recorded stock movements",
            )

        attrs = self._clean_attributes(changes, require_all=False)
        for name, value in attrs.items():
            setattr(part, name, value)

        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info("Updated part %s (%s)", part.id, ", ".join(sorted(attrs)) or "no changes")
        return part

    def adjust_quantity(self, part_id: int, delta: int) -> Part:
        """Apply a signed quantity change with a single guarded update.

        The range check is part of the UPDATE statement, so an issue computed
        from a stale read can never drive the stored quantity below zero. The
        bounds are written against the column so the comparison itself cannot
        overflow a 32-bit integer.

        Raises:
            RecordNotFoundException: If the part does not exist
            InsufficientStockException: If the result would be negative
            ValidationFailedException: If a receipt would overflow the stored quantity
        """
        stmt = (
            update(Part)
            .where(
                Part.id == part_id,
                Part.quantity >= -delta,
                Part.quantity <= MAX_COLUMN_INTEGER - delta,
            )
            .values(quantity=Part.quantity + delta)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)

        if result.rowcount == 0:
            current = self.db.execute(
                select(Part.part_number, Part.quantity).where(Part.id == part_id)
            ).one_or_none()
            if current is None:
                raise RecordNotFoundException("Part", part_id)
            if delta > 0:
                raise ValidationFailedException(
                    {"quantity": f"would raise stock of {current.part_number} above {MAX_COLUMN_INTEGER}"}
                )
            raise InsufficientStockException(current.part_number, -delta, current.quantity)

        part = self.get_part(part_id)
        self.db.refresh(part)
        return part

    def _clean_attributes(self, attrs: dict[str, Any], require_all: bool) -> dict[str, Any]:
        """Normalize part attributes, collecting every field error before raising."""
        errors: dict[str, str] = {}
        cleaned: dict[str, Any] = {}

        for name in REQUIRED_TEXT_FIELDS:
            if name not in attrs:
                if require_all:
                    errors[name] = "is required"
                continue
            value = attrs[name]
            if value is None or not str(value).strip():
                errors[name] = "must not be empty"
            else:
                cleaned[name] = str(value).strip()

        for name in OPTIONAL_TEXT_FIELDS:
            if name in attrs:
                value = attrs[name]
                if value is not None:
                    value = str(value).strip() or None
                cleaned[name] = value

        if "condition" in attrs or require_all:
            try:
                cleaned["condition"] = PartCondition(attrs.get("condition"))
            except ValueError:
                errors["condition"] = "must be one of " + ", ".join(c.value for c in PartCondition)

        if "reorder_point" in attrs:
            reorder_point = attrs["reorder_point"]
            if not isinstance(reorder_point, int) or not 0 <= reorder_point <= MAX_COLUMN_INTEGER:
                errors["reorder_point"] = f"must be an integer between 0 and {MAX_COLUMN_INTEGER}"
            else:
                cleaned["reorder_point"] = reorder_point

        if "unit_cost" in attrs:
            try:
                unit_cost = Decimal(str(attrs["unit_cost"]))
            except (InvalidOperation, ValueError):
                errors["unit_cost"] = "must be a number"
            else:
                if not unit_cost.is_finite() or unit_cost < 0:
                    errors["unit_cost"] = "must be a non-negative number"
                elif unit_cost > MAX_UNIT_COST:
                    errors["unit_cost"] = f"must not exceed {MAX_UNIT_COST}"
                else:
                    cleaned["unit_cost"] = unit_cost.quantize(Decimal("0.01"))

        if "shelf_life" in attrs:
            cleaned["shelf_life"] = attrs["shelf_life"]

        if errors:
            raise ValidationFailedException(errors)

        return cleaned
