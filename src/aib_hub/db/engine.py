"""
Database engine and session management
PostgreSQL in staging/production, SQLite accepted for local development and tests
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import Pool

from ..config import config

logger = logging.getLogger(__name__)


def _describe_database_url(url: str) -> str:
    """Describe DATABASE_URL without exposing credentials"""
    if "@" in url:
        return url.split("@", 1)[1].split("/", 1)[0]
    return url.split("://", 1)[0]


def create_database_engine(database_url: str = None):
    """Create database engine with pool settings appropriate for the backend"""
    database_url = database_url or config.DATABASE_URL
    
    if database_url.startswith("postgresql"):
        engine = create_engine(
            database_url,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_recycle=config.DB_POOL_RECYCLE,
            pool_timeout=config.DB_POOL_TIMEOUT,
            echo=False,
            connect_args={
                "connect_timeout": 10,
                "application_name": "aib_hub",
            },
        )
        logger.info(f"PostgreSQL engine configured (host: {_describe_database_url(database_url)})")
        logger.info(f"  - Pool size: {config.DB_POOL_SIZE}, max overflow: {config.DB_MAX_OVERFLOW}")
    else:
        engine = create_engine(database_url, connect_args={"check_same_thread": False})
        logger.info("SQLite engine configured (local development)")
    
    return engine


engine = create_database_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(Pool, "invalidate")
def receive_invalidate(dbapi_conn, connection_record, exception):
    """Called when a connection is invalidated"""
    logger.warning(f"Connection invalidated: {exception}")


def get_db() -> Generator:
    """
    Get database session.
    Use as FastAPI dependency: db: Session = Depends(get_db)
    
    Any exception raised while the request holds the session rolls back the
    open transaction before the session goes back to the pool.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind=None):
    """
    Create tables directly from the models.
    
    Production databases are migrated with Alembic (see migrate_db.py); this is
    for SQLite development databases and the test suite.
    """
    from .base import Base
    from . import models  # noqa: F401  (registers all tables on Base.metadata)
    
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables created")
