"""
Database connection and session management.

Provides the engine, transactional session scope and schema bootstrap.
Every service operation runs inside one ``get_session()`` scope, which is
one store transaction.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DEFAULT_URL = "sqlite:///data/tenderflow.db"
DEFAULT_TIMEOUT_SECONDS = 5.0


# =============================================================================
# Global Engine References
# =============================================================================

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


# =============================================================================
# SQLite Configuration
# =============================================================================


def _configure_sqlite(engine: Engine) -> None:
    """Configure SQLite for serialized writers.

    pysqlite's own transaction handling is switched off and every
    transaction starts with BEGIN IMMEDIATE, so the write lock is taken
    before the current row is read. Also enables:
    - Foreign key enforcement
    - WAL mode for concurrent readers
    """
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# =============================================================================
# Engine Creation
# =============================================================================


def get_engine(
    url: str = DEFAULT_URL,
    echo: bool = False,
    pool_size: int = 5,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> Engine:
    """Get or create the database engine.

    Args:
        url: SQLAlchemy database URL
        echo: Whether to log SQL statements
        pool_size: Connection pool size (ignored for SQLite)
        timeout_seconds: Upper bound for a single statement or lock wait

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    # Ensure data directory exists for SQLite
    if url.startswith("sqlite:///"):
        db_path = url.replace("sqlite:///", "")
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if url.startswith("sqlite"):
        _engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": timeout_seconds},
        )
        _configure_sqlite(_engine)
    else:
        timeout_ms = int(timeout_seconds * 1000)
        _engine = create_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=10,
            pool_pre_ping=True,
            pool_timeout=timeout_seconds,
            connect_args={
                "connect_timeout": max(1, int(timeout_seconds)),
                "options": f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}",
            },
        )

    _session_factory = sessionmaker(
        bind=_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )

    return _engine


# =============================================================================
# Session Management
# =============================================================================


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Open a session that is one store transaction.

    Commits when the block exits cleanly, rolls back on any exception.

    Usage:
        with get_session() as session:
            session.execute(...)

    Yields:
        SQLAlchemy Session instance
    """
    if _session_factory is None:
        get_engine()  # Initialize with defaults

    assert _session_factory is not None
    session = _session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Database Initialization
# =============================================================================


def init_db(
    url: str = DEFAULT_URL,
    echo: bool = False,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """Initialize the database schema.

    Creates all tables if they don't exist. For production use,
    prefer Alembic migrations.
    """
    engine = get_engine(url, echo=echo, timeout_seconds=timeout_seconds)
    Base.metadata.create_all(bind=engine)


def drop_db(url: str = DEFAULT_URL) -> None:
    """Drop all database tables.

    WARNING: This will delete all data!
    """
    engine = get_engine(url)
    Base.metadata.drop_all(bind=engine)


def dispose_engines() -> None:
    """Dispose of the engine and forget the session factory.

    Should be called on application shutdown.
    """
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
