import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from alembic import command as alembic_command
from alembic.config import Config as alembic_Config
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

# load .env file
load_dotenv()

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """
    Get database URL from Settings.

    ``ARLO_DATABASE_URL`` overrides the development SQLite default.
    """
    from enrol_arlo.settings import get_settings
    return get_settings().database_url


def create_db_engine(database_url: str):
    """
    Create SQLAlchemy engine with appropriate settings for the database type.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False}
        )
    else:
        return create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # Verify connections before use
        )


DATABASE_URL = get_database_url()
engine = create_db_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


@contextmanager
def unit_of_work(db: Session, atomic: bool = True) -> Generator[Session, None, None]:
    """
    Scope a multi-statement write sequence.

    With ``atomic`` the whole block commits once and is rolled back on any
    error. Without it callers commit per statement through ``step_commit``
    and an error only rolls back the statement in progress.

    Args:
        db: SQLAlchemy session to use
        atomic: Whether to wrap the block in a single transaction

    Yields:
        The same session
    """
    try:
        yield db
        if atomic:
            db.commit()
    except Exception:
        logger.warning("Rolling back unit of work after error")
        db.rollback()
        raise


def step_commit(db: Session, atomic: bool) -> None:
    """Commit the current statement when running non-atomically."""
    if not atomic:
        db.commit()


def should_auto_migrate() -> bool:
    """
    Check if ARLO_AUTO_MIGRATE is enabled.

    Returns:
        True if AUTO_MIGRATE is set to a truthy value.
    """
    from enrol_arlo.settings import get_settings
    return get_settings().auto_migrate


def run_alembic_upgrade() -> None:
    """
    Run Alembic migrations to upgrade database to head.

    This function is safe to call - it logs errors without crashing
    the application.
    """
    try:
        # alembic.ini sits at the repository root, beside this package
        root_dir = Path(__file__).resolve().parent.parent
        alembic_ini_path = root_dir / "alembic.ini"

        if not alembic_ini_path.exists():
            logger.error(f"alembic.ini not found at {alembic_ini_path}")
            return

        logger.info(f"Running Alembic migrations from {alembic_ini_path}")
        config = alembic_Config(str(alembic_ini_path))
        config.set_main_option("script_location", str(root_dir / "alembic"))

        alembic_command.upgrade(config, "head")
        logger.info("Alembic migrations completed successfully")

    except Exception as e:
        logger.error(f"Alembic migration failed: {e}")


def auto_migrate_on_startup() -> None:
    """
    Run database migrations on startup if ARLO_AUTO_MIGRATE is enabled.
    """
    if not should_auto_migrate():
        logger.debug("AUTO_MIGRATE is disabled - skipping migrations")
        return

    logger.info("AUTO_MIGRATE enabled - running database migrations")
    run_alembic_upgrade()
