"""
Author Pydantic Schemas

These schemas define the shape of data for Author-related API operations.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthorBase(BaseModel):
    """
    Base schema with shared author fields.

    Create and update accept exactly the same payload, so the
    validation rules are declared once here.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author's full name",
        examples=["George Orwell", "Jane Austen"],
    )

    bio: str | None = Field(
        default=None,
        description="Author biography",
        examples=["English novelist and essayist, journalist and critic..."],
    )

    birth_date: date = Field(
        ...,
        description="Date of birth (YYYY-MM-DD)",
        examples=["1903-06-25"],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """
        Validate that name is not just whitespace.

        Raises:
            ValueError: If the name is blank
        """
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class AuthorCreate(AuthorBase):
    """Schema for creating a new author."""
    pass


class AuthorUpdate(AuthorBase):
    """
    Schema for updating an existing author.

    PUT and PATCH both replace every field and use the same rules as
    creation, so name and birth_date are required here as well.
    """
    pass


class AuthorResponse(BaseModel):
    """
    Schema for author responses (what the API returns).

    Audit timestamps stay internal and are never serialized.
    """

    id: int = Field(..., description="Unique identifier", examples=[1, 42])
    name: str
    bio: str | None = None
    birth_date: date

    model_config = ConfigDict(
        # Allow creating schema from SQLAlchemy model attributes
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "George Orwell",
                "bio": "English novelist and essayist, best known for '1984' and 'Animal Farm'.",
                "birth_date": "1903-06-25",
            }
        },
    )
