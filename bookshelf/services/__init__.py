"""
Services Package

This package contains logic that is separate from HTTP handling (routers)
and easier to test in isolation.

Current services:
- cache.py: Cache backends (Redis, in-memory, no-op), cache key builders
  and the invalidation rules for authors and books
"""
