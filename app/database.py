"""Database connection and migration management."""

import logging
import re
from pathlib import Path

from sqlalchemy import MetaData, inspect, text

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from app.config import get_settings
from app.extensions import db

logger = logging.getLogger(__name__)


def check_db_connection() -> bool:
    """Check if database connection is working."""
    try:
        result = db.session.execute(text("SELECT 1"))
        return result.scalar() == 1
    except Exception:
        logger.exception("Database connectivity check failed")
        return False


def _get_alembic_config() -> Config:
    """Get Alembic configuration with database URL from application settings."""
    # alembic.ini lives in the project root (parent of app/)
    alembic_cfg_path = Path(__file__).parent.parent / "alembic.ini"

    config = Config(str(alembic_cfg_path))
    config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL)

    return config


def get_current_revision() -> str | None:
    """Get current database revision from Alembic version table."""
    inspector = inspect(db.engine)
    if "alembic_version" not in inspector.get_table_names():
        return None

    with db.engine.connect() as connection:
        row = connection.execute(text("SELECT version_num FROM alembic_version")).fetchone()
        return row[0] if row else None


def get_pending_migrations() -> list[str]:
    """Get list of pending migration revisions in chronological order."""
    script = ScriptDirectory.from_config(_get_alembic_config())

    head_rev = script.get_current_head()
    if not head_rev:
        return []

    current_rev = get_current_revision()
    if current_rev == head_rev:
        return []

    revisions = [
        rev.revision
        for rev in script.walk_revisions(base=current_rev or "base", head=head_rev)
        if rev.revision != current_rev
    ]
    revisions.reverse()
    return revisions


def drop_all_tables() -> None:
    """Drop all tables including Alembic version table."""
    metadata = MetaData()
    metadata.reflect(bind=db.engine)
    metadata.drop_all(bind=db.engine)


def _get_migration_info(script_dir: ScriptDirectory, revision: str) -> tuple[str, str]:
    """Extract a short revision id and the docstring title of a migration."""
    rev_obj = script_dir.get_revision(revision)
    if not rev_obj or not rev_obj.path:
        return revision[:7], "Unknown migration"

    content = Path(rev_obj.path).read_text()
    docstring_match = re.search(r'"""([^"\n]+)', content)
    if docstring_match:
        return revision[:7], docstring_match.group(1).strip()

    return revision[:7], "Migration"


def upgrade_database(recreate: bool = False) -> list[tuple[str, str]]:
    """Upgrade database with progress reporting.

    Args:
        recreate: If True, drop all tables first

    Returns:
        List of (revision, description) tuples for applied migrations
    """
    config = _get_alembic_config()
    script = ScriptDirectory.from_config(config)
    applied_migrations: list[tuple[str, str]] = []

    if recreate:
        logger.warning("Dropping all tables before migrating")
        drop_all_tables()

    pending = get_pending_migrations()
    if not pending:
        return applied_migrations

    with db.engine.begin() as connection:
        config.attributes["connection"] = connection

        for revision in pending:
            rev_short, description = _get_migration_info(script, revision)
            logger.info("Applying schema %s - %s", rev_short, description)
            command.upgrade(config, revision)
            applied_migrations.append((rev_short, description))

    return applied_migrations
