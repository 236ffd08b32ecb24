"""
Books Router

CRUD endpoints for books, plus the listing of one author's books.

Cache keys used here:
- books.all: list of all books
- book.{id}: a single book
- books.author.{id}: the books of one author

A book write touches up to two author listings: on update the book may
move from its old author to a new one, and both lists are outdated.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.database import get_by_id
from bookshelf.dependencies import AppCache, DbSession
from bookshelf.errors import invalid_field, persistence_errors
from bookshelf.models import Author, Book
from bookshelf.routers.authors import AUTHOR_NOT_FOUND
from bookshelf.schemas import (
    AuthorBookResponse,
    BookCreate,
    BookResponse,
    BookUpdate,
    ErrorResponse,
    ValidationErrorResponse,
)
from bookshelf.services.cache import (
    BOOKS_ALL_KEY,
    author_books_key,
    book_key,
    invalidate_book_cache,
)

logger = logging.getLogger(__name__)

BOOK_NOT_FOUND = "Book not found"
INVALID_AUTHOR = "The selected author id is invalid."

ERROR_RESPONSES = {
    422: {"model": ValidationErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Unexpected server error"},
}

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"model": ErrorResponse, "description": BOOK_NOT_FOUND},
        **ERROR_RESPONSES,
    },
)

# /authors/{author_id}/books belongs to the book handler but lives
# under the authors prefix
author_books_router = APIRouter(
    prefix="/authors",
    tags=["Books"],
    responses={
        404: {"model": ErrorResponse, "description": AUTHOR_NOT_FOUND},
        **ERROR_RESPONSES,
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_book_or_404(db: Session, book_id: int) -> Book:
    """
    Get a book by ID or raise 404.

    Raises:
        HTTPException: 404 if book not found
    """
    book = get_by_id(db, Book, book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=BOOK_NOT_FOUND,
        )
    return book


def ensure_author_exists(db: Session, author_id: int) -> None:
    """
    Check that author_id refers to a stored author.

    Raises:
        RequestValidationError: 422 on the author_id field
    """
    if get_by_id(db, Author, author_id) is None:
        raise invalid_field("author_id", INVALID_AUTHOR, author_id)


def serialize_book(book: Book) -> dict[str, Any]:
    return BookResponse.model_validate(book).model_dump(mode="json")


def load_books(db: Session) -> list[dict[str, Any]]:
    stmt = select(Book).order_by(Book.id)
    return [serialize_book(b) for b in db.execute(stmt).scalars().all()]


def load_book(db: Session, book_id: int) -> dict[str, Any] | None:
    book = get_by_id(db, Book, book_id)
    return serialize_book(book) if book is not None else None


def load_author_books(db: Session, author_id: int) -> list[dict[str, Any]]:
    stmt = select(Book).where(Book.author_id == author_id).order_by(Book.id)
    return [
        AuthorBookResponse.model_validate(b).model_dump(mode="json")
        for b in db.execute(stmt).scalars().all()
    ]


# =============================================================================
# CRUD Endpoints
# =============================================================================
@router.get(
    "",
    response_model=list[BookResponse],
    summary="List all books",
    description="Get a list of all books.",
)
def list_books(db: DbSession, cache: AppCache) -> list[dict[str, Any]]:
    """List all books, served from the books.all cache entry."""
    return cache.remember(BOOKS_ALL_KEY, lambda: load_books(db))


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Create a new book for an existing author.",
)
def create_book(
    book_data: BookCreate,
    db: DbSession,
    cache: AppCache,
) -> dict[str, Any]:
    """
    Create a new book.

    Raises:
        RequestValidationError: 422 if author_id does not exist
    """
    with persistence_errors(db, "An error occurred while saving the book data"):
        ensure_author_exists(db, book_data.author_id)

        book = Book(**book_data.model_dump())
        db.add(book)
        db.commit()
        db.refresh(book)

    invalidate_book_cache(cache, book.author_id)
    logger.info(f"Created book {book.id} for author {book.author_id}")

    return serialize_book(book)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    description="Retrieve detailed information about a specific book.",
)
def get_book(
    book_id: int,
    db: DbSession,
    cache: AppCache,
) -> dict[str, Any]:
    """Get a single book by its ID."""
    book = cache.remember(book_key(book_id), lambda: load_book(db, book_id))
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=BOOK_NOT_FOUND,
        )
    return book


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Replace an existing book's information, possibly moving it to another author.",
)
@router.patch(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Replace an existing book's information (same rules as PUT).",
)
def update_book(
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    cache: AppCache,
) -> dict[str, Any]:
    """
    Update an existing book.

    Both the previous and the new author's book lists are invalidated.
    When the author did not change the key is only forgotten once.

    Raises:
        HTTPException: 404 if book not found
        RequestValidationError: 422 if author_id does not exist
    """
    with persistence_errors(db, "An error occurred while updating the book data"):
        book = get_book_or_404(db, book_id)
        old_author_id = book.author_id

        ensure_author_exists(db, book_data.author_id)

        for field, value in book_data.model_dump().items():
            setattr(book, field, value)
        db.commit()
        db.refresh(book)

    invalidate_book_cache(cache, old_author_id, book.author_id, book_ids=[book_id])

    return serialize_book(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Permanently delete a book from the database.",
)
def delete_book(
    book_id: int,
    db: DbSession,
    cache: AppCache,
) -> None:
    """
    Delete a book.

    Returns 204 No Content on success.
    """
    with persistence_errors(db, "An error occurred while deleting the book data"):
        book = get_book_or_404(db, book_id)
        author_id = book.author_id
        db.delete(book)
        db.commit()

    invalidate_book_cache(cache, author_id, book_ids=[book_id])


# =============================================================================
# Books by Author
# =============================================================================
@author_books_router.get(
    "/{author_id}/books",
    response_model=list[AuthorBookResponse],
    summary="Get books by author",
    description="Get all books written by a specific author.",
)
def list_books_by_author(
    author_id: int,
    db: DbSession,
    cache: AppCache,
) -> list[dict[str, Any]]:
    """
    Get all books by a specific author.

    The author's existence is checked against the database on every
    request; only the book list itself is cached.
    """
    with persistence_errors(db, "An error occurred while fetching books by author"):
        if get_by_id(db, Author, author_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=AUTHOR_NOT_FOUND,
            )

        return cache.remember(
            author_books_key(author_id),
            lambda: load_author_books(db, author_id),
        )
