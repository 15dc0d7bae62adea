"""
Database connection and session management.
Connects to Supabase PostgreSQL via DATABASE_URL (SQLite for local runs).

The engine is created on first use so importing the app never opens a
connection.
"""
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from tweetcraft.core.config import get_settings
from tweetcraft.models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # FastAPI runs sync routes on a threadpool
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # psycopg 3 driver for postgres URLs without an explicit driver
    if database_url.startswith("postgres://"):
        database_url = "postgresql+psycopg://" + database_url[len("postgres://"):]
    elif database_url.startswith("postgresql://"):
        database_url = "postgresql+psycopg://" + database_url[len("postgresql://"):]

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = _build_engine(get_settings().database_url)
        logger.info("Database engine created (%s)", _engine.url.get_backend_name())
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_factory


def init_db():
    """Create all tables via SQLAlchemy metadata."""
    Base.metadata.create_all(bind=get_engine())
    print("✅ Database tables created/verified", flush=True)


def get_db() -> Session:
    """
    Dependency for FastAPI routes.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session():
    """
    Context manager for database sessions outside of a request.

    Usage:
        with get_db_session() as db:
            user = db.query(User).first()
    """
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
