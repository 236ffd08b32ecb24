"""
Bookshelf API Application Package

A small REST API for authors and the books they write, backed by a
relational store and a read-through cache.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Caching and cache invalidation
"""

__version__ = "0.1.0"
