"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxBase: Shared fields and validation rules
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields accepted when updating a record
- XxxResponse: Fields returned in API responses (no audit timestamps)
"""

from bookshelf.schemas.author import (
    AuthorBase,
    AuthorCreate,
    AuthorResponse,
    AuthorUpdate,
)
from bookshelf.schemas.book import (
    AuthorBookResponse,
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
)
from bookshelf.schemas.error import ErrorResponse, ValidationErrorResponse

__all__ = [
    # Author schemas
    "AuthorBase",
    "AuthorCreate",
    "AuthorUpdate",
    "AuthorResponse",
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "AuthorBookResponse",
    # Error envelopes
    "ErrorResponse",
    "ValidationErrorResponse",
]
