"""Database connection and session management for Aegis.

This module provides the SQLAlchemy engine, session factory, and declarative
base required for interacting with the database. It also provides dependency
injection helpers for FastAPI route handlers.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.settings import settings

logger = logging.getLogger(__name__)

# Dynamic configuration based on the type of database we are connecting to
engine_kwargs: dict[str, Any] = {
    "echo": settings.DATABASE_ECHO,
    "pool_pre_ping": True,
}

# SQLite requires specific arguments to allow multi-threading in FastAPI
# This connects_args check must only be applied to SQLite, not PostgreSQL
if settings.DATABASE_URL.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    # An in-memory database lives on one connection; every session must share it
    if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

try:
    engine: Engine = create_engine(settings.DATABASE_URL, **engine_kwargs)
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    raise

if engine.dialect.name == "sqlite":
    # SQLAlchemy emits BEGIN itself; pysqlite autobegin breaks SAVEPOINT nesting
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_autobegin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_sqlite_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

# Session factory for creating new database sessions contextually
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all SQLAlchemy declarative models to inherit from
Base = declarative_base()


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """Context manager for obtaining a database session outside a request.

    Used by the Celery workers. The caller owns commit and rollback; the
    session is always closed on exit.

    Yields:
        A SQLAlchemy database session.
    """
    db: Session = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database error in get_db context manager: {e}")
        raise
    finally:
        db.close()


def get_db_session() -> Generator[Session, None, None]:
    """FastAPI dependency for obtaining a database session.

    This function yields a database session and commits the transaction
    if the request completes. If an exception is raised, it rolls back so
    that multi-record writes (an action completion and its XP award) are
    never persisted halfway.

    Yields:
        A SQLAlchemy database session.
    """
    db: Session = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.error(f"Database transaction error in get_db_session: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Initialize the database by creating all tables defined in the models.

    Raises:
        Exception: If table creation fails.
    """
    # Importing the models registers every table on Base.metadata
    from . import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database tables: {e}")
        raise
