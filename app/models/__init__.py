"""SQLAlchemy models for Aircraft Parts Inventory."""

# Import all models here for Alembic auto-generation
from app.models.audit_log import AuditLog
from app.models.part import Part, PartCondition, StockStatus
from app.models.stock_transaction import MovementType, StockTransaction
from app.models.user import User, UserRole

__all__: list[str] = [
    "AuditLog",
    "MovementType",
    "Part",
    "PartCondition",
    "StockStatus",
    "StockTransaction",
    "User",
    "UserRole",
]
