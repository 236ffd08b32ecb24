"""
Authors Router

CRUD endpoints for authors.

Reads go through the cache (authors.all, author.{id}); every write
invalidates the keys it made outdated before responding.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.database import get_by_id
from bookshelf.dependencies import AppCache, DbSession
from bookshelf.errors import persistence_errors
from bookshelf.models import Author
from bookshelf.schemas import (
    AuthorCreate,
    AuthorResponse,
    AuthorUpdate,
    ErrorResponse,
    ValidationErrorResponse,
)
from bookshelf.services.cache import (
    AUTHORS_ALL_KEY,
    author_key,
    invalidate_author_cache,
    invalidate_book_cache,
)

logger = logging.getLogger(__name__)

AUTHOR_NOT_FOUND = "Author not found"

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
    responses={
        404: {"model": ErrorResponse, "description": AUTHOR_NOT_FOUND},
        422: {"model": ValidationErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Unexpected server error"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_author_or_404(db: Session, author_id: int) -> Author:
    """Get an author by ID or raise 404."""
    author = get_by_id(db, Author, author_id)
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=AUTHOR_NOT_FOUND,
        )
    return author


def serialize_author(author: Author) -> dict[str, Any]:
    """JSON-ready representation, the same shape that is cached."""
    return AuthorResponse.model_validate(author).model_dump(mode="json")


def load_authors(db: Session) -> list[dict[str, Any]]:
    stmt = select(Author).order_by(Author.id)
    return [serialize_author(a) for a in db.execute(stmt).scalars().all()]


def load_author(db: Session, author_id: int) -> dict[str, Any] | None:
    author = get_by_id(db, Author, author_id)
    return serialize_author(author) if author is not None else None


# =============================================================================
# CRUD Endpoints
# =============================================================================
@router.get(
    "",
    response_model=list[AuthorResponse],
    summary="List all authors",
    description="Get a list of all authors in the system.",
)
def list_authors(db: DbSession, cache: AppCache) -> list[dict[str, Any]]:
    """List all authors, served from the authors.all cache entry."""
    return cache.remember(AUTHORS_ALL_KEY, lambda: load_authors(db))


@router.post(
    "",
    response_model=AuthorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new author",
    description="Create a new author in the system.",
)
def create_author(
    author_data: AuthorCreate,
    db: DbSession,
    cache: AppCache,
) -> dict[str, Any]:
    """
    Create a new author.

    Invalidates authors.all so the next listing includes the new record.
    """
    author = Author(**author_data.model_dump())

    with persistence_errors(db, "An error occurred while saving the author data"):
        db.add(author)
        db.commit()
        db.refresh(author)

    invalidate_author_cache(cache)
    logger.info(f"Created author {author.id}")

    return serialize_author(author)


@router.get(
    "/{author_id}",
    response_model=AuthorResponse,
    summary="Get an author by ID",
    description="Retrieve detailed information about a specific author.",
)
def get_author(
    author_id: int,
    db: DbSession,
    cache: AppCache,
) -> dict[str, Any]:
    """
    Get a single author by ID.

    A missing author is a plain 404. The miss is not cached, so an
    author created later under the same ID is found right away.
    """
    author = cache.remember(author_key(author_id), lambda: load_author(db, author_id))
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=AUTHOR_NOT_FOUND,
        )
    return author


@router.put(
    "/{author_id}",
    response_model=AuthorResponse,
    summary="Update an author",
    description="Replace an existing author's information.",
)
@router.patch(
    "/{author_id}",
    response_model=AuthorResponse,
    summary="Update an author",
    description="Replace an existing author's information (same rules as PUT).",
)
def update_author(
    author_id: int,
    author_data: AuthorUpdate,
    db: DbSession,
    cache: AppCache,
) -> dict[str, Any]:
    """Update an existing author."""
    with persistence_errors(db, "An error occurred while updating the author data"):
        author = get_author_or_404(db, author_id)
        for field, value in author_data.model_dump().items():
            setattr(author, field, value)
        db.commit()
        db.refresh(author)

    invalidate_author_cache(cache, author_id)

    return serialize_author(author)


@router.delete(
    "/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an author",
    description="Permanently delete an author together with the author's books.",
)
def delete_author(
    author_id: int,
    db: DbSession,
    cache: AppCache,
) -> None:
    """
    Delete an author.

    The author's books are deleted with it, so their cache entries are
    invalidated along with the author's own.
    """
    with persistence_errors(db, "An error occurred while deleting the author data"):
        author = get_author_or_404(db, author_id)
        book_ids = [book.id for book in author.books]
        db.delete(author)
        db.commit()

    invalidate_author_cache(cache, author_id)
    invalidate_book_cache(cache, author_id, book_ids=book_ids)

    if book_ids:
        logger.info(f"Deleted author {author_id} and {len(book_ids)} book(s)")
