"""Engine and session factory for the transaction store"""

from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintrack_core.config import settings
from fintrack_core.infrastructure.database.models import Base

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=settings.db_pool_recycle_seconds,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_schema() -> None:
    """Create missing tables; used for local development and tests"""
    Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Session]:
    """Request-scoped session; repositories commit their own units of work"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
