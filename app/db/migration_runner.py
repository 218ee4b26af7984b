"""
Migration Runner - Runs Alembic migrations at application startup.

Pending migrations are applied before the API starts accepting traffic.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from app.config import settings

logger = logging.getLogger(__name__)

# Path to alembic.ini relative to project root
ALEMBIC_INI_PATH = Path(__file__).parent.parent.parent / "alembic.ini"


def get_sync_database_url(url: str | None = None) -> str:
    """Get synchronous database URL for migrations.

    Alembic's command API uses synchronous connections, so asyncpg URLs are
    converted to psycopg2 URLs.
    """
    url = url or settings.database_url
    return url.replace("+asyncpg", "+psycopg2")


def _get_current_revision(engine: Engine) -> str | None:
    """Get the current database revision."""
    with engine.connect() as conn:
        context = MigrationContext.configure(conn)
        return context.get_current_revision()


def _get_head_revision(alembic_cfg: Config) -> str | None:
    """Get the head revision from migration scripts."""
    script = ScriptDirectory.from_config(alembic_cfg)
    return script.get_current_head()


def _build_config(sync_url: str) -> Config:
    alembic_cfg = Config(str(ALEMBIC_INI_PATH))
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_INI_PATH.parent / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_url.replace("%", "%%"))
    # Logging is already configured by structlog
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def run_migrations() -> None:
    """
    Run pending Alembic migrations.

    Called at application startup to ensure the database schema is up to date.
    Only runs migrations if there are pending ones.
    """
    if not ALEMBIC_INI_PATH.exists():
        logger.warning(f"Alembic config not found at {ALEMBIC_INI_PATH}, skipping migrations")
        return

    try:
        sync_url = get_sync_database_url()
        alembic_cfg = _build_config(sync_url)

        # Create sync engine to check current state
        engine = create_engine(sync_url)

        try:
            current = _get_current_revision(engine)
            head = _get_head_revision(alembic_cfg)

            if current == head:
                logger.info(f"Database schema is up to date (revision: {current})")
                return

            logger.info(f"Running migrations from {current} to {head}")

            command.upgrade(alembic_cfg, "head")

            new_current = _get_current_revision(engine)
            logger.info(f"Migrations complete. Database now at revision: {new_current}")

        finally:
            engine.dispose()

    except Exception as e:
        logger.error(f"Migration failed: {e}")
        raise RuntimeError(f"Database migration failed: {e}") from e


def check_migrations_status() -> dict[str, str | bool | None]:
    """
    Check migration status without applying them.

    Returns:
        Dict with current revision, head revision, and whether migrations are pending.
    """
    if not ALEMBIC_INI_PATH.exists():
        return {"error": "Alembic config not found"}

    try:
        sync_url = get_sync_database_url()
        alembic_cfg = _build_config(sync_url)

        engine = create_engine(sync_url)
        try:
            current = _get_current_revision(engine)
            head = _get_head_revision(alembic_cfg)
            return {
                "current_revision": current,
                "head_revision": head,
                "pending": current != head,
            }
        finally:
            engine.dispose()

    except Exception as e:
        return {"error": str(e)}
