"""Flask application factory for Aircraft Parts Inventory backend."""

from typing import TYPE_CHECKING

from flask import Response
from flask_cors import CORS
from flask_log_request_id import RequestID
from sqlalchemy.orm import Session, sessionmaker

if TYPE_CHECKING:
    from app.config import Settings

from app.app import App
from app.config import get_settings
from app.extensions import db
from app.services.container import ServiceContainer
from app.utils import get_current_correlation_id

REQUEST_ID_HEADER = "X-Request-Id"

WIRED_API_MODULES = [
    "app.api.auth",
    "app.api.parts",
    "app.api.transactions",
    "app.api.audit",
    "app.api.reports",
    "app.api.metrics",
    "app.api.health",
]


def _session_factory(app: App) -> sessionmaker[Session]:
    # db.engine is only reachable inside an application context
    with app.app_context():
        return sessionmaker(
            class_=Session,
            bind=db.engine,
            autoflush=True,
            expire_on_commit=False,
        )


def _finish_request_session(container: ServiceContainer, exc: BaseException | None) -> None:
    """Settle the request's session: rollback when flagged or failed, else commit."""
    try:
        db_session = container.db_session()
        flagged = db_session.info.pop("needs_rollback", False)
        if exc or flagged:
            db_session.rollback()
        else:
            db_session.commit()
        db_session.close()
    finally:
        container.db_session.reset()


def create_app(settings: "Settings | None" = None) -> App:
    """Create and configure Flask application."""
    settings = settings or get_settings()

    app = App(__name__)
    app.config.from_object(settings)

    db.init_app(app)
    from app import models  # noqa: F401

    from app.utils.spectree_config import configure_spectree

    configure_spectree(app)

    # Container comes after SpecTree so the wired views see the validated api
    container = ServiceContainer()
    container.config.override(settings)
    container.session_maker.override(_session_factory(app))
    container.wire(modules=WIRED_API_MODULES)
    app.container = container

    CORS(app, origins=settings.CORS_ORIGINS, expose_headers=[REQUEST_ID_HEADER])
    RequestID(app)

    @app.after_request
    def echo_request_id(response: Response) -> Response:
        request_id = get_current_correlation_id()
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

    from app.utils.flask_error_handlers import register_error_handlers

    register_error_handlers(app)

    from app.api import api_bp

    app.register_blueprint(api_bp)

    @app.teardown_request
    def close_session(exc: BaseException | None) -> None:
        _finish_request_session(container, exc)

    return app
