"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Bookshelf API.

We use synchronous SQLAlchemy with the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Commit on success, rollback on failure
4. Close session when request ends

This is implemented using FastAPI's dependency injection (get_db).
"""

from collections.abc import Generator
from typing import Any, TypeVar

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookshelf.config import Settings, get_settings

# Get settings instance
settings = get_settings()

# Primary keys are 32-bit Integer columns (SERIAL on PostgreSQL)
MAX_ID = 2_147_483_647


# =============================================================================
# Database Engine
# =============================================================================
def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    PostgreSQL gets a sized connection pool with pre-ping. SQLite does not
    accept pool sizing arguments, and needs foreign keys switched on per
    connection so that ON DELETE CASCADE on books.author_id is honoured.
    """
    kwargs: dict[str, Any] = {"echo": settings.debug}

    if settings.is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow
        kwargs["pool_pre_ping"] = True

    engine = create_engine(settings.database_url, **kwargs)

    if settings.is_sqlite:
        event.listen(engine, "connect", enable_sqlite_foreign_keys)

    return engine


def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores FOREIGN KEY clauses unless this pragma is set."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: We control when to commit
# - autoflush=False: Don't auto-flush before queries
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Creates a new session, yields it to the route handler, and closes it
    when the request ends (in the finally block).

    Usage in Routes:
        @router.get("/authors")
        def list_authors(db: Session = Depends(get_db)):
            return db.execute(select(Author)).scalars().all()

    Yields:
        SQLAlchemy Session instance
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

    Useful for local development and the seed script.
    In production, use Alembic migrations instead!
    """
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Never use in production.
    """
    Base.metadata.drop_all(bind=engine)


ModelT = TypeVar("ModelT", bound=Base)


def get_by_id(db: Session, model: type[ModelT], row_id: int) -> ModelT | None:
    """
    Session.get() for ids that come straight from a request.

    An id outside the Integer column range cannot belong to any row, and
    the driver rejects it instead of finding nothing. Such ids are
    treated as missing.
    """
    if not 1 <= row_id <= MAX_ID:
        return None
    return db.get(model, row_id)
