"""Prometheus metrics service for collecting and exposing application metrics."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from prometheus_client import Counter, Gauge, generate_latest

logger = logging.getLogger(__name__)


class MetricsServiceProtocol(ABC):
    """Protocol for metrics service implementations."""

    @abstractmethod
    def record_movement(self, movement_type: str, quantity: int) -> None:
        """Record a committed stock movement."""
        pass

    @abstractmethod
    def record_movement_rejected(self, reason: str) -> None:
        """Record a stock movement that was refused."""
        pass

    @abstractmethod
    def record_login(self, outcome: str) -> None:
        """Record a login attempt outcome."""
        pass

    @abstractmethod
    def record_audit_write_failure(self) -> None:
        """Record an audit entry that could not be persisted."""
        pass

    @abstractmethod
    def update_inventory_metrics(self, summary: dict[str, Any]) -> None:
        """Refresh inventory gauges from a report summary."""
        pass

    @abstractmethod
    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format."""
        pass


class MetricsService(MetricsServiceProtocol):
    """Service class for Prometheus metrics collection and exposure."""

    def __init__(self) -> None:
        self.initialize_metrics()

    def initialize_metrics(self) -> None:
        """Define all Prometheus metric objects."""
        # Check if already initialized (for container singleton reuse)
        if hasattr(self, 'inventory_total_parts'):
            return

        # Inventory Metrics
        self.inventory_total_parts = Gauge(
            'inventory_total_parts',
            'Total parts in the catalog'
        )
        self.inventory_total_quantity = Gauge(
            'inventory_total_quantity',
            'Sum of all on-hand quantities'
        )
        self.inventory_total_value = Gauge(
            'inventory_total_value',
            'On-hand inventory value (quantity x unit cost)'
        )
        self.inventory_low_stock_parts = Gauge(
            'inventory_low_stock_parts',
            'Parts in stock at or below their reorder point'
        )
        self.inventory_out_of_stock_parts = Gauge(
            'inventory_out_of_stock_parts',
            'Parts with zero quantity'
        )

        # Ledger Metrics
        self.inventory_movements_total = Counter(
            'inventory_movements_total',
            'Committed stock movements by type',
            ['type']
        )
        self.inventory_movement_quantity_total = Counter(
            'inventory_movement_quantity_total',
            'Units moved by committed stock movements',
            ['type']
        )
        self.inventory_movements_rejected_total = Counter(
            'inventory_movements_rejected_total',
            'Stock movements refused by reason',
            ['reason']
        )

        # Auth and audit Metrics
        self.auth_login_attempts_total = Counter(
            'auth_login_attempts_total',
            'Login attempts by outcome',
            ['outcome']
        )
        self.audit_write_failures_total = Counter(
            'inventory_audit_write_failures_total',
            'Audit entries that could not be persisted'
        )

    def record_movement(self, movement_type: str, quantity: int) -> None:
        self.inventory_movements_total.labels(type=movement_type).inc()
        self.inventory_movement_quantity_total.labels(type=movement_type).inc(quantity)

    def record_movement_rejected(self, reason: str) -> None:
        self.inventory_movements_rejected_total.labels(reason=reason).inc()

    def record_login(self, outcome: str) -> None:
        self.auth_login_attempts_total.labels(outcome=outcome).inc()

    def record_audit_write_failure(self) -> None:
        self.audit_write_failures_total.inc()

    def update_inventory_metrics(self, summary: dict[str, Any]) -> None:
        """Refresh inventory gauges from a report summary."""
        self.inventory_total_parts.set(summary["total_parts"])
        self.inventory_total_quantity.set(summary["total_quantity"])
        self.inventory_total_value.set(float(summary["total_value"]))
        self.inventory_low_stock_parts.set(summary["low_stock_count"])
        self.inventory_out_of_stock_parts.set(summary["out_of_stock_count"])

    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format."""
        return generate_latest().decode('utf-8')
