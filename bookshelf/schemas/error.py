"""
Error Envelope Schemas

Every error leaves the API as {"error": ...}. These models only document
that shape in the OpenAPI schema; the exception handlers in main.py
build the actual responses.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of 404 and 500 responses."""

    error: str = Field(..., examples=["Author not found"])


class ValidationErrorResponse(BaseModel):
    """Body of 422 responses: messages grouped by field name."""

    error: dict[str, list[str]] = Field(
        ...,
        examples=[{"name": ["Field required"], "birth_date": ["Input should be a valid date"]}],
    )
