"""CLI commands for database and account operations."""

import argparse
import getpass
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import NoReturn

from sqlalchemy.orm import Session

from app import create_app
from app.app import App
from app.database import (
    check_db_connection,
    get_current_revision,
    get_pending_migrations,
    upgrade_database,
)
from app.exceptions import BusinessLogicException
from app.models.audit_log import AuditLog
from app.models.part import Part
from app.models.stock_transaction import StockTransaction
from app.models.user import User, UserRole


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Aircraft Parts Inventory CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # upgrade-db command
    upgrade_parser = subparsers.add_parser(
        "upgrade-db",
        help="Apply database migrations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Apply pending database migrations using Alembic.

Examples:
  inventory-cli upgrade-db                    Apply pending migrations
  inventory-cli upgrade-db --recreate --yes-i-am-sure  Drop all tables and recreate from migrations
        """,
    )
    upgrade_parser.add_argument(
        "--recreate",
        action="store_true",
        help="Drop all tables first, then run all migrations from scratch",
    )
    upgrade_parser.add_argument(
        "--yes-i-am-sure",
        action="store_true",
        help="Required safety flag when using --recreate",
    )

    # load-test-data command
    load_test_data_parser = subparsers.add_parser(
        "load-test-data",
        help="Recreate database and load fixed test data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Recreate database from scratch and load fixed test dataset.

This command:
1. Drops all tables and recreates the database schema (like upgrade-db --recreate)
2. Creates the admin, controller and viewer accounts
3. Loads the aircraft parts catalog from app/data/test_data/
4. Replays the stock movements so every quantity is backed by the ledger

Examples:
  inventory-cli load-test-data --yes-i-am-sure    Load complete test dataset
        """,
    )
    load_test_data_parser.add_argument(
        "--yes-i-am-sure",
        action="store_true",
        help="Required safety flag to confirm database recreation",
    )

    # create-user command
    create_user_parser = subparsers.add_parser(
        "create-user",
        help="Provision a user account",
    )
    create_user_parser.add_argument("username", help="Login name")
    create_user_parser.add_argument("name", help="Display name")
    create_user_parser.add_argument(
        "role",
        choices=[role.value for role in UserRole],
        help="Role granted to the user",
    )
    create_user_parser.add_argument(
        "--password",
        help="Password for the account (prompted for when omitted)",
    )

    # verify-ledger command
    subparsers.add_parser(
        "verify-ledger",
        help="Check every part's quantity against its stock movements",
    )

    return parser

def _fail(message: str, *details: str) -> NoReturn:
    print(f"❌ {message}", file=sys.stderr)
    for line in details:
        print(f"   {line}", file=sys.stderr)
    sys.exit(1)


def _require_connection(app: App) -> None:
    if not check_db_connection():
        _fail("Cannot connect to database. Check your DATABASE_URL configuration.")
    print(f"🗄  Using database: {app.config['SQLALCHEMY_DATABASE_URI']}")


@contextmanager
def _command_session(app: App) -> Iterator[Session]:
    """Hand out the container's session and release it when the command ends."""
    session = app.container.db_session()
    try:
        yield session
    finally:
        session.close()
        app.container.db_session.reset()


def _report_applied(applied: list[tuple[str, str]], verb: str) -> None:
    print(f"✅ {verb} {len(applied)} migration(s)")
    for revision, description in applied:
        print(f"   • {revision}: {description}")


def handle_upgrade_db(
    app: App, recreate: bool = False, confirmed: bool = False
) -> None:
    """Bring the schema to the latest Alembic revision, optionally from scratch."""
    with app.app_context():
        _require_connection(app)

        if recreate and not confirmed:
            _fail(
                "--recreate requires --yes-i-am-sure flag for safety",
                "Every table would be dropped before migrating.",
            )

        current_rev = get_current_revision()
        print(f"📍 Current database revision: {current_rev or 'none (new database)'}")

        pending = get_pending_migrations()
        if not recreate and not pending:
            print("✅ Database is up to date. No migrations to apply.")
            return

        if recreate:
            print("⚠️  Dropping every table and replaying all migrations")
        else:
            print(f"📦 Applying {len(pending)} pending migration(s)")

        try:
            applied = upgrade_database(recreate=recreate)
        except Exception as e:
            _fail(f"Migration failed: {e}")
        _report_applied(applied, "Applied")


def handle_load_test_data(app: App, confirmed: bool = False) -> None:
    """Rebuild the schema and load the bundled demonstration inventory."""
    with app.app_context():
        _require_connection(app)

        if not confirmed:
            _fail(
                "--yes-i-am-sure flag is required for safety",
                "Every table would be dropped and refilled with test data.",
            )

        print("⚠️  Dropping every table and loading test data")
        try:
            _report_applied(upgrade_database(recreate=True), "Recreated schema with")

            with _command_session(app) as session:
                app.container.test_data_service().load_full_dataset()
                print("✅ Test data loaded:")
                for label, model in (
                    ("users", User),
                    ("parts", Part),
                    ("stock movements", StockTransaction),
                    ("audit entries", AuditLog),
                ):
                    print(f"   • {session.query(model).count()} {label}")
        except Exception as e:
            _fail(f"Failed to load test data: {e}")


def handle_create_user(
    app: App, username: str, name: str, role: str, password: str | None = None
) -> None:
    """Provision an account; prompts twice for the password when none is given."""
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat password: "):
            _fail("Passwords do not match")

    with app.app_context():
        _require_connection(app)

        with _command_session(app) as session:
            try:
                user = app.container.credential_service().create_user(
                    username=username,
                    password=password,
                    name=name,
                    role=UserRole(role),
                )
                session.commit()
            except BusinessLogicException as e:
                session.rollback()
                _fail(e.message)
            print(f"✅ Created user {user.username} ({user.role.value}) with id {user.id}")


def handle_verify_ledger(app: App) -> None:
    """Exit non-zero when any part's quantity differs from its ledger balance."""
    with app.app_context():
        _require_connection(app)

        with _command_session(app) as session:
            stock_service = app.container.stock_service()
            mismatched = stock_service.verify_ledger()
            if not mismatched:
                print("✅ Every part quantity matches its stock movements")
                return

            lines = []
            for part_id in mismatched:
                part = session.get(Part, part_id)
                balance = stock_service.ledger_balance(part_id)
                lines.append(
                    f"• {part.part_number} (id {part_id}): quantity {part.quantity}, ledger {balance}"
                )
        _fail(f"{len(mismatched)} part(s) disagree with the ledger:", *lines)


def main() -> NoReturn:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    app = create_app()
    commands: dict[str, Callable[[], None]] = {
        "upgrade-db": lambda: handle_upgrade_db(
            app=app, recreate=args.recreate, confirmed=args.yes_i_am_sure
        ),
        "load-test-data": lambda: handle_load_test_data(
            app=app, confirmed=args.yes_i_am_sure
        ),
        "create-user": lambda: handle_create_user(
            app=app,
            username=args.username,
            name=args.name,
            role=args.role,
            password=args.password,
        ),
        "verify-ledger": lambda: handle_verify_ledger(app=app),
    }
    commands[args.command]()
    sys.exit(0)


if __name__ == "__main__":
    main()
