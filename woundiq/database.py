"""
Database connection and session management.
Provides SQLAlchemy engine, session, transaction scope and base class for models.
"""
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from .config import Settings, settings


def engine_options(config: Settings) -> Dict[str, Any]:
    """
    Build connection pool arguments for the configured database.

    SQLite (tests, local development) uses its own pool classes which do
    not accept sizing arguments, so only pre-ping is applied there.

    Args:
        config: Application settings

    Returns:
        dict: Keyword arguments for create_engine
    """
    if config.database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": config.db_max_idle_conns,
        "max_overflow": config.db_max_open_conns - config.db_max_idle_conns,
        "pool_recycle": config.db_conn_max_lifetime_seconds,
        "pool_pre_ping": True,
    }


# Create SQLAlchemy engine for database connection
engine = create_engine(settings.database_url, **engine_options(settings))

# Create session factory for database sessions
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

# Create base class for declarative models
Base = declarative_base()


def get_db():
    """
    Database dependency - Creates and yields a database session.

    The session is automatically closed after the request is processed,
    even if an exception occurs during request handling.

    Yields:
        SQLAlchemy Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block of writes as one unit of work.

    Commits when the block exits normally and rolls back on every other
    exit path, re-raising the original exception.

    Args:
        db: Database session

    Yields:
        SQLAlchemy Session: The same session, inside the transaction
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise
