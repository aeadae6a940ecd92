"""API blueprints for Aircraft Parts Inventory."""

from flask import Blueprint

# Create main API blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")


# Import and register all resource blueprints
# Note: Imports are done after api_bp creation to avoid circular imports
from app.api.audit import audit_bp  # noqa: E402
from app.api.auth import auth_bp  # noqa: E402
from app.api.health import health_bp  # noqa: E402
from app.api.metrics import metrics_bp  # noqa: E402
from app.api.parts import parts_bp  # noqa: E402
from app.api.reports import reports_bp  # noqa: E402
from app.api.transactions import transactions_bp  # noqa: E402

api_bp.register_blueprint(audit_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(auth_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(health_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(metrics_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(parts_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(reports_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(transactions_bp)  # type: ignore[attr-defined]
