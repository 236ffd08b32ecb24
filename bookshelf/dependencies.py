"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle, and tests replace
them through app.dependency_overrides.

Instead of writing:
    def list_authors(db: Session = Depends(get_db), cache: Cache = Depends(get_cache)):

You can write:
    def list_authors(db: DbSession, cache: AppCache):
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.services.cache import Cache, get_cache

# Per-request database session
DbSession = Annotated[Session, Depends(get_db)]

# Shared read-through cache
AppCache = Annotated[Cache, Depends(get_cache)]
