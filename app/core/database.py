from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from app.core.config import get_settings


@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(
        settings.DATABASE_URL,
        poolclass=QueuePool,
        pool_size=20,          # steady-state connections
        max_overflow=10,       # burst capacity
        pool_timeout=30,       # seconds to wait for a connection
        pool_recycle=1800,     # recycle connections every 30 min
        pool_pre_ping=True     # auto-heal stale connections
    )


@contextmanager
def get_db():
    """
    Context-managed raw psycopg2 connection from the pool.

    The connection is always returned to the pool.
    """
    conn = get_engine().raw_connection()
    try:
        yield conn
    finally:
        conn.close()
