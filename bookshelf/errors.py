"""
Error Handling Helpers

The API reports three kinds of failure, always as {"error": ...}:

- Validation errors (422): messages grouped by field name
- Not-found errors (404): a short entity-not-found message
- Unexpected errors (500): a generic message; the cause only goes to the log

Routers raise HTTPException / RequestValidationError; the exception
handlers registered in main.py turn those into the JSON envelope.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Locations FastAPI prefixes onto validation error paths
REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}

# Pydantic prefixes messages raised from our own validators with this
VALUE_ERROR_PREFIX = "Value error, "


def field_errors(errors: Sequence[Any]) -> dict[str, list[str]]:
    """
    Group validation errors by field name.

    Example:
        [{"loc": ("body", "name"), "msg": "Field required"}]
        -> {"name": ["Field required"]}

    A malformed body (no field in the location) is reported under "body".
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in REQUEST_LOCATIONS:
            field_loc = loc[1:]
            field = ".".join(field_loc) if field_loc else loc[0]
        else:
            field = ".".join(loc) or "body"

        if error.get("type") == "json_invalid":
            field = "body"

        message = str(error.get("msg", "Invalid value"))
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]

        grouped.setdefault(field, []).append(message)
    return grouped


def invalid_field(field: str, message: str, value: Any = None) -> RequestValidationError:
    """
    Build a 422 error for a single body field.

    Used for rules the schema cannot check by itself, like an author_id
    that has to exist in the database.
    """
    return RequestValidationError(
        [
            {
                "type": "value_error",
                "loc": ("body", field),
                "msg": message,
                "input": value,
            }
        ]
    )


@contextmanager
def persistence_errors(db: Session, message: str) -> Iterator[None]:
    """
    Turn database failures inside the block into a generic 500.

    The session is rolled back and the real cause is logged. HTTP errors
    raised inside the block (404, 422) pass through untouched.

    Usage:
        with persistence_errors(db, "An error occurred while saving the author data"):
            db.add(author)
            db.commit()
    """
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.exception(message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        ) from None
