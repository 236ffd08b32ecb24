#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample authors and books for development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using bookshelf settings
2. Clears existing data (optional)
3. Creates sample authors and their books
4. Invalidates the cached listings so the API sees the new rows
"""

import sys
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from bookshelf.database import SessionLocal, create_tables
from bookshelf.models import Author, Book
from bookshelf.services.cache import (
    get_cache,
    invalidate_author_cache,
    invalidate_book_cache,
)

AUTHORS = [
    {
        "name": "George Orwell",
        "bio": "English novelist and essayist, journalist and critic.",
        "birth_date": date(1903, 6, 25),
        "books": [
            ("1984", "A dystopian novel set in a totalitarian society.", date(1949, 6, 8)),
            ("Animal Farm", "A farmyard fable about revolution and power.", date(1945, 8, 17)),
        ],
    },
    {
        "name": "Jane Austen",
        "bio": "English novelist known for her critiques of the British landed gentry.",
        "birth_date": date(1775, 12, 16),
        "books": [
            ("Pride and Prejudice", "The turbulent relationship of Elizabeth Bennet and Mr Darcy.", date(1813, 1, 28)),
            ("Emma", None, date(1815, 12, 23)),
        ],
    },
    {
        "name": "Isaac Asimov",
        "bio": None,
        "birth_date": date(1920, 1, 2),
        "books": [
            ("Foundation", "The fall of a galactic empire, foreseen by psychohistory.", date(1951, 6, 1)),
        ],
    },
]


def clear_data(db: Session) -> tuple[list[int], list[int]]:
    """
    Clear all existing data from the database.

    Returns:
        IDs of the deleted authors and books
    """
    print("Clearing existing data...")
    author_ids = list(db.execute(select(Author.id)).scalars())
    book_ids = list(db.execute(select(Book.id)).scalars())
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.commit()
    print("Data cleared.")
    return author_ids, book_ids


def create_authors_and_books(db: Session) -> list[Author]:
    """Create sample authors together with their books."""
    print("Creating authors and books...")
    authors = []
    for data in AUTHORS:
        author = Author(
            name=data["name"],
            bio=data["bio"],
            birth_date=data["birth_date"],
        )
        author.books = [
            Book(title=title, description=description, publish_date=published)
            for title, description, published in data["books"]
        ]
        db.add(author)
        authors.append(author)

    db.commit()
    for author in authors:
        db.refresh(author)

    print(f"Created {len(authors)} authors.")
    return authors


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        removed_authors: list[int] = []
        removed_books: list[int] = []
        if clear_existing:
            removed_authors, removed_books = clear_data(db)

        authors = create_authors_and_books(db)
        books = [book for author in authors for book in author.books]

        # Rows changed behind the API's back: drop every entry they touch
        author_ids = removed_authors + [author.id for author in authors]
        cache = get_cache()
        for author_id in author_ids:
            invalidate_author_cache(cache, author_id)
        invalidate_book_cache(
            cache,
            *author_ids,
            book_ids=removed_books + [book.id for book in books],
        )

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        print(f"  - Books: {len(books)}")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
