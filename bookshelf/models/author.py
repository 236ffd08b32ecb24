"""
Author Model

Represents an author in the bookshelf database.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base

# Avoid a circular import at runtime while keeping the type hints
if TYPE_CHECKING:
    from bookshelf.models.book import Book


class Author(Base):
    """
    Author model representing writers in the system.

    Table: authors

    Relationships:
    - books: One-to-Many, removed together with the author

    Example:
        author = Author(
            name="George Orwell",
            bio="English novelist and essayist...",
            birth_date=date(1903, 6, 25),
        )
        db.add(author)
        db.commit()
    """

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author's full name"
    )

    bio: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Author biography"
    )

    birth_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Author's date of birth"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    # Set by the database, never exposed through the API
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # Deleting an author deletes the author's books as well.
    # passive_deletes lets the ON DELETE CASCADE on books.author_id do the
    # work for rows that were never loaded into the session.
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Book.id",
    )

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
