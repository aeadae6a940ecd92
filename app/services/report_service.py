"""Report service for aggregating inventory statistics."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from app.models.part import Part, PartCondition, StockStatus
from app.services.base import BaseService

EXPIRY_WARNING_DAYS = 90


class ReportService(BaseService):
    """Service class for inventory report operations."""

    def get_summary(self, today: date | None = None) -> dict[str, Any]:
        """Returns aggregated inventory statistics.

        Returns:
            Dictionary containing part, unit and value totals, low and out of
            stock counts, quarantined count, shelf-life counts and a
            per-category breakdown.
        """
        today = today or date.today()
        parts = self._all_parts()

        categories: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"parts": 0, "quantity": 0, "value": Decimal("0.00")}
        )
        for part in parts:
            bucket = categories[part.category]
            bucket["parts"] += 1
            bucket["quantity"] += part.quantity
            bucket["value"] += part.total_value

        expired, expiring = self._split_by_shelf_life(parts, today)

        return {
            "total_parts": len(parts),
            "total_quantity": sum(part.quantity for part in parts),
            "total_value": sum((part.total_value for part in parts), Decimal("0.00")),
            "low_stock_count": sum(1 for part in parts if part.stock_status == StockStatus.LOW),
            "out_of_stock_count": sum(1 for part in parts if part.stock_status == StockStatus.OUT_OF_STOCK),
            "quarantined_count": sum(1 for part in parts if part.condition == PartCondition.QUARANTINED),
            "expired_count": len(expired),
            "expiring_count": len(expiring),
            "categories": [
                {"category": name, **totals}
                for name, totals in sorted(categories.items())
            ],
        }

    def get_reorder_report(self) -> list[dict[str, Any]]:
        """Returns parts at or below their reorder point, lowest quantity first."""
        rows = []
        for part in self._all_parts():
            if part.quantity > part.reorder_point:
                continue
            deficit = max(0, part.reorder_point - part.quantity)
            rows.append({
                "part": part,
                "deficit": deficit,
                "deficit_cost": Decimal(deficit) * Decimal(part.unit_cost),
            })

        rows.sort(key=lambda row: (row["part"].quantity, row["part"].id))
        return rows

    def get_shelf_life_report(self, today: date | None = None) -> dict[str, list[dict[str, Any]]]:
        """Returns expired parts and parts expiring within the warning window.

        Args:
            today: Reference date, defaults to the current date

        Returns:
            Dictionary with ``expired`` and ``expiring`` lists of
            ``{"part", "days_remaining"}`` rows, soonest first.
        """
        today = today or date.today()
        expired, expiring = self._split_by_shelf_life(self._all_parts(), today)
        return {"expired": expired, "expiring": expiring}

    def _all_parts(self) -> list[Part]:
        return list(self.db.execute(select(Part).order_by(Part.id)).scalars().all())

    def _split_by_shelf_life(
        self, parts: list[Part], today: date
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        expired: list[dict[str, Any]] = []
        expiring: list[dict[str, Any]] = []
        horizon = today + timedelta(days=EXPIRY_WARNING_DAYS)

        for part in parts:
            if part.shelf_life is None:
                continue
            days_remaining = (part.shelf_life - today).days
            row = {"part": part, "days_remaining": days_remaining}
            if days_remaining <= 0:
                expired.append(row)
            elif part.shelf_life <= horizon:
                expiring.append(row)

        expired.sort(key=lambda row: row["days_remaining"])
        expiring.sort(key=lambda row: row["days_remaining"])
        return expired, expiring
