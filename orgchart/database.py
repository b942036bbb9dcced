"""Database configuration and session management."""

import os
from typing import Optional

import pg8000
import sqlalchemy
from dotenv import load_dotenv
from sqlalchemy import Engine

from .models import Base

load_dotenv()

# Global variable for lazy initialization
_engine: Optional[Engine] = None


def _get_local_connection():
    """Create a direct pg8000 connection from the DB_* environment variables."""
    db_host = os.getenv("DB_HOST", "localhost")
    db_port = int(os.getenv("DB_PORT", "5432"))
    db_name = os.getenv("DB_NAME", "orgchart")
    db_user = os.getenv("DB_USER", "postgres")
    db_password = os.getenv("DB_PASSWORD", "postgres")

    return pg8000.connect(
        host=db_host,
        port=db_port,
        database=db_name,
        user=db_user,
        password=db_password,
    )


def create_engine(
    url: Optional[str] = None, pool_size: int = 5, max_overflow: int = 10
) -> Engine:
    """Create a new database engine.

    Args:
        url: SQLAlchemy URL; falls back to DATABASE_URL, then to a local
            PostgreSQL connection built from DB_* variables
        pool_size: Number of connections to maintain in the pool
        max_overflow: Maximum overflow connections allowed

    Returns:
        A new SQLAlchemy Engine instance
    """
    url = url or os.getenv("DATABASE_URL")

    if url:
        return sqlalchemy.create_engine(url, pool_pre_ping=True)

    return sqlalchemy.create_engine(
        "postgresql+pg8000://",
        creator=_get_local_connection,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
    )


def get_engine() -> Engine:
    """Get or create the database engine with lazy initialization."""
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine


def create_tables(engine: Optional[Engine] = None) -> None:
    """Create all tables known to the models metadata."""
    Base.metadata.create_all(engine or get_engine())
