"""
Book Pydantic Schemas

Handles the book payloads, including the single author reference.
Whether author_id points at a real author is checked by the router
against the database; the schema only checks its shape.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookBase(BaseModel):
    """Base schema with shared book fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    description: str | None = Field(
        default=None,
        description="Book description or summary",
        examples=["A dystopian novel set in a totalitarian society..."],
    )

    publish_date: date = Field(
        ...,
        description="Date of publication (YYYY-MM-DD)",
        examples=["1949-06-08"],
    )

    author_id: int = Field(
        ...,
        description="ID of the author who wrote the book",
        examples=[1],
    )

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize title."""
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "1984",
        "description": "A dystopian novel...",
        "publish_date": "1949-06-08",
        "author_id": 1
    }
    """
    pass


class BookUpdate(BookBase):
    """
    Schema for updating a book.

    Same rules as creation; moving a book to another author is done by
    sending a different author_id.
    """
    pass


class BookResponse(BaseModel):
    """Schema for book responses. Audit timestamps are excluded."""

    id: int
    title: str
    description: str | None = None
    publish_date: date
    author_id: int

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "1984",
                "description": "A dystopian novel set in a totalitarian society.",
                "publish_date": "1949-06-08",
                "author_id": 1,
            }
        },
    )


class AuthorBookResponse(BaseModel):
    """A book as listed under its author (author_id is implied by the URL)."""

    id: int
    title: str
    description: str | None = None
    publish_date: date

    model_config = ConfigDict(from_attributes=True)
