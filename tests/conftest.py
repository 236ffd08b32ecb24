"""
pytest Fixtures for Bookshelf API Tests

Shared fixtures used across all test files.

For database tests we use:
- session scope for the engine (one in-memory SQLite database)
- function scope for the tables, which are created before and dropped
  after every test so tests never see each other's rows
- a fresh session per request, like the real get_db dependency
- a fresh MemoryCache per test, injected through dependency_overrides
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_BACKEND"] = "memory"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.database import Base, enable_sqlite_foreign_keys, get_db
from bookshelf.main import app
from bookshelf.models import Author, Book
from bookshelf.services.cache import MemoryCache, get_cache


# =============================================================================
# CACHE DOUBLES
# =============================================================================
class RecordingCache(MemoryCache):
    """MemoryCache that remembers which keys were read and forgotten."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.remembered: list[str] = []
        self.forgotten: list[str] = []

    def remember(self, key, compute):
        self.remembered.append(key)
        return super().remember(key, compute)

    def forget(self, key: str) -> bool:
        self.forgotten.append(key)
        return super().forget(key)

    def reset_calls(self) -> None:
        self.remembered.clear()
        self.forgotten.clear()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the single connection alive for the whole session.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> Generator[sessionmaker, None, None]:
    """Create the tables for one test and drop them afterwards."""
    Base.metadata.create_all(bind=engine)

    # expire_on_commit=False keeps fixture objects readable after the
    # API has changed or deleted their rows
    factory = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )

    yield factory

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Session for arranging and inspecting data directly in tests."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def cache() -> RecordingCache:
    """A fresh, empty cache for each test."""
    return RecordingCache()


@pytest.fixture(scope="function")
def client(session_factory, cache: RecordingCache) -> Generator[TestClient, None, None]:
    """
    Create a test client wired to the test database and cache.

    Both dependencies are replaced through dependency_overrides.
    """

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author for testing."""
    author = Author(
        name="George Orwell",
        bio="English novelist and essayist, journalist and critic.",
        birth_date=date(1903, 6, 25),
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def second_author(db_session: Session) -> Author:
    """Create a second author for moving books between authors."""
    author = Author(
        name="Jane Austen",
        bio=None,
        birth_date=date(1775, 12, 16),
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_book(db_session: Session, sample_author: Author) -> Book:
    """Create a sample book written by sample_author."""
    book = Book(
        title="1984",
        description="A dystopian novel set in a totalitarian society.",
        publish_date=date(1949, 6, 8),
        author_id=sample_author.id,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def author_with_books(db_session: Session, sample_author: Author, second_author: Author) -> Author:
    """sample_author with three books, plus two books by second_author."""
    titles = [("Animal Farm", sample_author), ("Burmese Days", sample_author),
              ("Homage to Catalonia", sample_author), ("Emma", second_author),
              ("Persuasion", second_author)]
    for i, (title, author) in enumerate(titles):
        db_session.add(
            Book(
                title=title,
                description=None,
                publish_date=date(1930 + i, 1, 1),
                author_id=author.id,
            )
        )
    db_session.commit()
    return sample_author
