"""
Database Configuration Module

SQLAlchemy 2.0 setup for GroupFinder: engine, session factory, declarative
base and the per-request session dependency.

Session Management Pattern
==========================
One session per request:
1. Request arrives -> create a session
2. Services use it for every read and write of that request
3. Services commit once the fact row and its summary fields are written
4. The session is closed when the request ends

Summary fields (vote counters, average rating, reputation totals) are
written in the same transaction as the rows they are derived from, so a
commit either persists both or neither.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from groupfinder.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# pool_pre_ping tests connections before use so stale ones are replaced.
# echo logs SQL statements in debug mode only.

engine = create_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
    echo=settings.debug,
)


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Usage in Routes:
        @router.get("/groups/")
        def list_groups(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance, closed when the request ends
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Intended for development and tests. Production schemas are managed
    with Alembic migrations.
    """
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Development and tests only.
    """
    Base.metadata.drop_all(bind=engine)
