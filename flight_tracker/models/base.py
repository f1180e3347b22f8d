"""
SQLAlchemy base configuration and session management.

Uses SQLAlchemy 2.0 style with type hints and declarative base.
Designed to be portable between SQLite (dev/tests) and PostgreSQL (prod).

DATABASE_URL is required: importing this module without it fails
immediately rather than letting the server start against nothing.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from flight_tracker.config import config, DatabaseConfig

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def create_db_engine(db_config: DatabaseConfig, echo: bool = False) -> Engine:
    """
    Build an engine with the pool bounds from configuration.

    The pool keeps at most ``pool_size`` connections, recycles connections
    idle longer than ``idle_timeout`` seconds and gives up connecting after
    ``connect_timeout`` seconds.
    """
    if not db_config.is_configured:
        raise RuntimeError(
            'DATABASE_URL environment variable is not set. Please check your .env file.'
        )

    engine_kwargs = {
        'echo': echo,  # Log SQL in debug mode
        'pool_pre_ping': True,
    }

    if db_config.is_sqlite:
        # sqlite3 takes its connect timeout as 'timeout'
        engine_kwargs['connect_args'] = {
            'check_same_thread': False,
            'timeout': db_config.connect_timeout,
        }
        if ':memory:' not in db_config.url and db_config.url not in ('sqlite://', 'sqlite:///'):
            engine_kwargs.update(
                pool_size=db_config.pool_size,
                max_overflow=0,
                pool_timeout=db_config.connect_timeout,
                pool_recycle=db_config.idle_timeout,
            )
    else:
        engine_kwargs['connect_args'] = {'connect_timeout': db_config.connect_timeout}
        engine_kwargs.update(
            pool_size=db_config.pool_size,
            max_overflow=0,
            pool_timeout=db_config.connect_timeout,
            pool_recycle=db_config.idle_timeout,
        )

    new_engine = create_engine(db_config.url, **engine_kwargs)

    if db_config.is_sqlite:
        @event.listens_for(new_engine, 'connect')
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Turn on foreign key enforcement, which SQLite leaves off per connection."""
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    return new_engine


engine = create_db_engine(config.database, echo=config.debug)


# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,  # Returned rows stay readable after commit
)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_session() as session:
            session.execute(...)

    Automatically handles commit/rollback and session cleanup.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """
    Initialize database schema.

    Creates all tables if they don't exist. For production,
    use migrations instead.
    """
    # Register models with the metadata before create_all
    import flight_tracker.models.flight  # noqa: F401
    Base.metadata.create_all(bind=engine)


def check_connection() -> bool:
    """Run a trivial query to confirm the database is reachable."""
    try:
        with SessionLocal() as session:
            session.execute(text('SELECT 1'))
        logger.info('Database connection successful')
        return True
    except SQLAlchemyError as e:
        logger.error(f'Database connection failed: {e}')
        return False
