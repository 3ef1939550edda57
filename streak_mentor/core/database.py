"""
Database helpers for the SQL-backed streak store.

This module provides:
- Engine construction with pooling for server databases
- A commit-or-rollback session context manager
- The key/value table the store writes to
"""
from contextlib import contextmanager
from sqlalchemy import create_engine, MetaData, Table, Column, Integer, String, DateTime, Text, UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool
from sqlalchemy.sql import func

metadata = MetaData()

POOL_SIZE = 5
MAX_OVERFLOW = 10
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600  # seconds


def build_engine(url: str) -> Engine:
    """Create an engine; SQLite keeps SQLAlchemy's own pool choice."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        echo=False,
    )


@contextmanager
def get_db_session(session_factory):
    """Yield a session that commits on success and rolls back on error."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all_tables(engine: Engine) -> None:
    """Create missing tables; existing ones are left alone."""
    metadata.create_all(bind=engine)


# One row per (namespace, key)
kv_entries = Table(
    'kv_entries',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('namespace', String(100), nullable=False),
    Column('key', String(100), nullable=False),
    Column('value', Text, nullable=False),
    Column('updated_at', DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False),
    UniqueConstraint('namespace', 'key', name='uq_kv_entries_namespace_key'),
)
