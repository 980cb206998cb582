"""SQLAlchemy database session management.

This module provides database engine configuration, session factory,
and dependency injection for FastAPI endpoints. The CLI builds its own
factory against an explicit database file through build_session_factory().
"""

import logging
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.server.config import settings

logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for ORM models
Base = declarative_base()

# Global engine instance
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _sqlite_engine(database_path: Path, echo: bool = False) -> Engine:
    """Create a SQLite engine, creating the parent directory if needed."""
    db_dir = database_path.parent
    if not db_dir.exists():
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created database directory: {db_dir}")

    return create_engine(
        f"sqlite:///{database_path}",
        connect_args={"check_same_thread": False},  # Needed for SQLite
        pool_pre_ping=True,  # Verify connections before using
        echo=echo,
    )


def init_engine() -> Engine:
    """Initialize the server's SQLAlchemy engine.

    Returns:
        Configured SQLAlchemy engine
    """
    global _engine

    if _engine is not None:
        return _engine

    _engine = _sqlite_engine(settings.get_database_path(), echo=settings.debug)
    logger.info(f"Database engine initialized: {settings.database_url}")
    return _engine


def get_session_factory() -> sessionmaker:
    """Get SQLAlchemy session factory.

    Returns:
        Configured sessionmaker instance
    """
    global _SessionLocal

    if _SessionLocal is None:
        engine = init_engine()
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine,
        )

    return _SessionLocal


def build_session_factory(database_path: Optional[str] = None) -> sessionmaker:
    """Build a standalone session factory with all tables created.

    Args:
        database_path: SQLite file path (``~`` expanded); defaults to the
            server's configured database

    Returns:
        sessionmaker bound to a fresh engine
    """
    # Import models so they register with Base.metadata
    from src.server.database import models  # noqa: F401

    path = Path(database_path).expanduser() if database_path else settings.get_database_path()
    engine = _sqlite_engine(path)
    Base.metadata.create_all(bind=engine)
    logger.debug(f"Session factory ready for {path}")

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions.

    Provides a database session that is automatically closed after use.

    Yields:
        SQLAlchemy database session
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables for the registered models."""
    from src.server.database import models  # noqa: F401

    engine = init_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


def check_database_connection() -> bool:
    """Check if database connection is working.

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        engine = init_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
