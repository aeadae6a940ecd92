"""Pytest configuration and fixtures."""

import sqlite3
from collections.abc import Callable, Generator
from typing import Any

import pytest
from flask import Flask
from prometheus_client import REGISTRY
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app import create_app
from app.config import Settings
from app.database import upgrade_database
from app.models.part import Part
from app.models.user import User, UserRole
from app.services.container import ServiceContainer

TEST_PASSWORD = "correct-horse"


@pytest.fixture(autouse=True)
def clear_prometheus_registry():
    """Clear Prometheus registry before and after each test to ensure isolation.

    Each test builds its own Flask app and container, and metrics cannot be
    registered twice in the same registry.
    """
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            # Collector may have already been unregistered or not exist
            pass
    yield
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            pass


def _build_test_settings() -> Settings:
    """Construct base Settings object for tests."""
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        SECRET_KEY="test-secret-key",
        DEBUG=True,
        FLASK_ENV="testing",
        CORS_ORIGINS=["http://localhost:3000"],
        JWT_SECRET="test-jwt-secret",
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with in-memory database."""
    return _build_test_settings()


@pytest.fixture(scope="session")
def template_connection() -> Generator[sqlite3.Connection, None, None]:
    """Create a template SQLite database once and apply migrations."""
    conn = sqlite3.connect(":memory:", check_same_thread=False)

    settings = _build_test_settings().model_copy()
    settings.DATABASE_URL = "sqlite://"
    settings.set_engine_options_override({
        "poolclass": StaticPool,
        "creator": lambda: conn,
    })

    template_app = create_app(settings)
    with template_app.app_context():
        upgrade_database(recreate=True)

    yield conn

    conn.close()


@pytest.fixture
def app(test_settings: Settings, template_connection: sqlite3.Connection) -> Generator[Flask, None, None]:
    """Create Flask app for testing using a fresh copy of the template database."""
    clone_conn = sqlite3.connect(":memory:", check_same_thread=False)
    template_connection.backup(clone_conn)

    settings = test_settings.model_copy()
    settings.DATABASE_URL = "sqlite://"
    settings.set_engine_options_override({
        "poolclass": StaticPool,
        "creator": lambda: clone_conn,
    })

    app = create_app(settings)

    try:
        yield app
    finally:
        with app.app_context():
            from app.extensions import db as flask_db

            flask_db.session.remove()

        clone_conn.close()


@pytest.fixture
def session(container: ServiceContainer) -> Generator[Session, None, None]:
    """Create a new database session for a test."""

    session = container.db_session()

    exc = None
    try:
        yield session
    except Exception as e:
        exc = e

    if exc:
        session.rollback()
    else:
        session.commit()
    session.close()

    container.db_session.reset()


@pytest.fixture
def client(app: Flask):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def container(app: Flask):
    """Access to the DI container for testing with session provided."""
    container = app.container

    with app.app_context():
        from sqlalchemy.orm import sessionmaker

        from app.extensions import db as flask_db

        SessionLocal = sessionmaker(
            bind=flask_db.engine, autoflush=True, expire_on_commit=False
        )

    container.session_maker.override(SessionLocal)

    return container


@pytest.fixture
def make_user(container: ServiceContainer, session: Session) -> Callable[..., User]:
    """Factory creating committed users with a known password."""

    def _make_user(
        role: UserRole = UserRole.VIEWER,
        username: str | None = None,
        name: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        username = username or role.value.lower().replace(" ", "_")
        user = container.credential_service().create_user(
            username=username,
            password=password,
            name=name or f"Test {role.value}",
            role=role,
        )
        session.commit()
        return user

    return _make_user


@pytest.fixture
def users(make_user: Callable[..., User]) -> dict[UserRole, User]:
    """One user per role."""
    return {role: make_user(role) for role in UserRole}


@pytest.fixture
def auth_headers(container: ServiceContainer) -> Callable[[User], dict[str, str]]:
    """Build an Authorization header carrying a fresh token for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = container.token_service().issue(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def make_part(container: ServiceContainer, users: dict[UserRole, User]) -> Callable[..., Part]:
    """Factory creating committed parts, booking any opening quantity through the ledger."""

    def _make_part(quantity: int = 0, **overrides: Any) -> Part:
        attrs: dict[str, Any] = {
            "part_number": "PN-3305-C",
            "description": "EFIS Display Unit",
            "category": "Avionics",
            "manufacturer": "Honeywell",
            "location": "Warehouse B",
            "condition": "Serviceable",
            "reorder_point": 4,
            "unit_cost": "32000.00",
            "serial_number": "SN-EF-77231",
            "batch_number": "BT-2025-002",
            "cert_of_conformance": "COC-HW-2025-0098",
        }
        attrs.update(overrides)
        return container.stock_service().create_part_with_opening_stock(
            attrs, quantity, users[UserRole.ADMIN].id
        )

    return _make_part
