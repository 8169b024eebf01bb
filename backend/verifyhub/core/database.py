"""
Database connection and session management
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import structlog

from verifyhub.core.config import settings

logger = structlog.get_logger()


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Requests run in the threadpool, so the connection must cross threads
        return {"connect_args": {"check_same_thread": False}, "echo": False}
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }


# Create database engine with connection pooling
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    Yields a database session and ensures it's closed after use
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("database_session_error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


if settings.DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        """Enforce foreign keys on SQLite connections"""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def check_connection(db: Session) -> bool:
    """Probe the store with a trivial query"""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("database_probe_failed", error=str(e))
        return False


def init_db():
    """Initialize database tables"""
    # Import models so they register with the metadata before create_all
    from verifyhub import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("database_initialized")
