"""
Book Model

Represents a book written by exactly one author.

The author link is a plain foreign key (books.author_id -> authors.id)
with ON DELETE CASCADE, so removing an author removes the author's books
at the database level too.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base

if TYPE_CHECKING:
    from bookshelf.models.author import Author


class Book(Base):
    """
    Book model representing books in the library.

    Table: books

    Fields:
    - title: Book title (required)
    - description: Book summary/description
    - publish_date: When the book was published (required)
    - author_id: The author who wrote the book (required)

    Example:
        book = Book(
            title="1984",
            description="A dystopian novel...",
            publish_date=date(1949, 6, 8),
            author_id=orwell.id,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Book title"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    # Date (not DateTime) because we only care about the day
    publish_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Date of publication"
    )

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
        comment="Author who wrote the book"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author_id={self.author_id})"
