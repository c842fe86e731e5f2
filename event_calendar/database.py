"""
Database engine and sessions for the database storage backend.

Provides:
- create_db_engine: engine configured for SQLite or a pooled server database
- SessionLocal: session factory bound to the configured engine
- init_db / check_connection: table creation and liveness check
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from event_calendar.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """
    Create the engine for settings.database_url.

    SQLite shares one connection across threads so ``:memory:`` databases
    survive between sessions; other databases get a small pre-pinged pool.
    """
    echo = settings.log_level == "DEBUG"

    if settings.uses_sqlite:
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )

    return create_engine(
        settings.database_url,
        pool_size=5,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=echo,
    )


_settings = get_settings()
_settings.validate_production_config()

engine = create_db_engine(_settings)

# Loaded rows stay readable after commit
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session that commits on exit and rolls back on error.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create the events table if it does not exist."""
    from event_calendar.models.base import Base

    Base.metadata.create_all(bind=engine)
    logger.info(f"Event tables ready on {engine.url.render_as_string(hide_password=True)}")


def check_connection() -> bool:
    """
    Test database connection.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with get_db_context() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
