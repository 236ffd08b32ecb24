"""
SQLAlchemy Models Package

This package contains all database models for the Bookshelf API.

Model Relationships:
- Author -> Book: One-to-Many (an author writes many books,
                  every book has exactly one author)

Import all models here to:
1. Make them available as: from bookshelf.models import Author, Book
2. Ensure Alembic discovers them for migrations
"""

from bookshelf.models.author import Author
from bookshelf.models.book import Book

__all__ = [
    "Author",
    "Book",
]
