"""
Caching Service

This module provides the read-through cache used by the author and book
routers.

Features:
- A small Cache interface: remember (get-or-populate) and forget (invalidate)
- Redis backend with JSON serialization and graceful degradation
- In-process TTL backend (cachetools) for single-process deployments and tests
- No-op backend for running without any cache
- Cache key builders and invalidation helpers for both resources

Cache Strategy:
- Every cached read lives for a fixed TTL (one hour by default)
- Lookup misses (None) are never cached
- Writes invalidate the exact keys that may hold outdated data
  before the response is returned

Cache Keys:
- authors.all          all authors
- author.{id}          one author
- books.all            all books
- book.{id}            one book
- books.author.{id}    books of one author
"""

import json
import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any, Optional

import redis
from cachetools import TTLCache
from redis.exceptions import RedisError

from bookshelf.config import CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS, Settings, get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# Cache Interface
# =============================================================================

class Cache:
    """
    Base class for cache backends.

    Subclasses implement get, set and forget. remember() is built on top
    of them and is what the routers use for cached reads.

    Values must be JSON compatible (dicts, lists, strings, numbers),
    e.g. the output of model_dump(mode="json").
    """

    backend = "base"

    def __init__(self, ttl: int = CACHE_TTL_SECONDS) -> None:
        self.ttl = ttl

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> bool:
        raise NotImplementedError

    def forget(self, key: str) -> bool:
        raise NotImplementedError

    def remember(self, key: str, compute: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, computing and storing it on a miss.

        If compute() returns None nothing is stored, so repeated lookups
        of a missing record keep going to the database.

        Args:
            key: Cache key
            compute: Zero-argument callable producing the fresh value

        Returns:
            Cached or freshly computed value
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = compute()
        if value is not None:
            self.set(key, value)
        return value

    def stats(self) -> dict:
        return {"backend": self.backend, "status": "ok"}

    def close(self) -> None:
        """Release backend resources. Most backends have none."""


# =============================================================================
# Redis Backend
# =============================================================================

class RedisCache(Cache):
    """
    Redis-backed cache.

    The connection is opened lazily on first use. If Redis is unreachable
    every operation degrades to a miss (reads) or a no-op (writes), so the
    API keeps serving straight from the database.
    """

    backend = "redis"

    def __init__(
        self,
        url: str,
        ttl: int = CACHE_TTL_SECONDS,
        client: Optional[redis.Redis] = None,
    ) -> None:
        super().__init__(ttl)
        self.url = url
        self._client = client

    def get_client(self) -> Optional[redis.Redis]:
        """
        Get or create the Redis client.

        Returns:
            Redis client instance or None if connection fails
        """
        if self._client is not None:
            return self._client

        try:
            client = redis.from_url(
                self.url,
                decode_responses=True,  # Return strings instead of bytes
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
        except RedisError as e:
            logger.warning(f"Failed to connect to Redis: {e}. Caching disabled.")
            return None

        logger.info("Successfully connected to Redis")
        self._client = client
        return client

    def get(self, key: str) -> Optional[Any]:
        client = self.get_client()
        if client is None:
            return None

        try:
            value = client.get(key)
        except RedisError as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

        if value is None:
            logger.debug(f"Cache MISS: {key}")
            return None

        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning(f"Cache JSON decode error for {key}: {e}")
            return None

        logger.debug(f"Cache HIT: {key}")
        return decoded

    def set(self, key: str, value: Any) -> bool:
        client = self.get_client()
        if client is None:
            return False

        try:
            serialized = json.dumps(value)
            client.setex(key, self.ttl, serialized)
        except RedisError as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False
        except (TypeError, ValueError) as e:
            logger.warning(f"Cache serialization error for {key}: {e}")
            return False

        logger.debug(f"Cache SET: {key} (TTL: {self.ttl}s)")
        return True

    def forget(self, key: str) -> bool:
        client = self.get_client()
        if client is None:
            return False

        try:
            client.delete(key)
        except RedisError as e:
            logger.warning(f"Cache delete error for {key}: {e}")
            return False

        logger.debug(f"Cache DELETE: {key}")
        return True

    def stats(self) -> dict:
        client = self.get_client()
        if client is None:
            return {"backend": self.backend, "status": "disconnected"}

        try:
            info = client.info("stats")
            return {
                "backend": self.backend,
                "status": "connected",
                "hits": info.get("keyspace_hits", 0),
                "misses": info.get("keyspace_misses", 0),
                "keys": client.dbsize(),
            }
        except RedisError:
            return {"backend": self.backend, "status": "error"}

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Redis connection closed")


# =============================================================================
# In-Memory Backend
# =============================================================================

class MemoryCache(Cache):
    """
    In-process TTL cache backed by cachetools.TTLCache.

    TTLCache is not thread-safe on its own, so every access goes through
    a lock. When maxsize entries are stored the least recently used one
    is evicted, and expired entries are purged on every write.

    Values are stored as JSON text, so callers always get a fresh copy
    and the stored value behaves exactly like one that went through Redis.
    """

    backend = "memory"

    def __init__(
        self,
        ttl: int = CACHE_TTL_SECONDS,
        maxsize: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(ttl)
        self._lock = threading.Lock()
        self._store: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=clock)
        self.hits = 0
        self.misses = 0

    @property
    def maxsize(self) -> int:
        return int(self._store.maxsize)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            serialized = self._store.get(key)
            if serialized is None:
                self.misses += 1
            else:
                self.hits += 1

        if serialized is None:
            logger.debug(f"Cache MISS: {key}")
            return None

        logger.debug(f"Cache HIT: {key}")
        return json.loads(serialized)

    def set(self, key: str, value: Any) -> bool:
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Cache serialization error for {key}: {e}")
            return False

        with self._lock:
            self._store[key] = serialized

        logger.debug(f"Cache SET: {key} (TTL: {self.ttl}s)")
        return True

    def forget(self, key: str) -> bool:
        with self._lock:
            self._store.pop(key, None)
        logger.debug(f"Cache DELETE: {key}")
        return True

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> dict:
        with self._lock:
            self._store.expire()
            live = len(self._store)
        return {
            "backend": self.backend,
            "status": "ok",
            "hits": self.hits,
            "misses": self.misses,
            "keys": live,
            "maxsize": self.maxsize,
        }


# =============================================================================
# No-op Backend
# =============================================================================

class NullCache(Cache):
    """Cache that stores nothing. Every remember() goes to the database."""

    backend = "null"

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any) -> bool:
        return False

    def forget(self, key: str) -> bool:
        return True


# =============================================================================
# Backend Selection
# =============================================================================

def build_cache(settings: Settings) -> Cache:
    """Create the cache backend named by settings.cache_backend."""
    if settings.cache_backend == "memory":
        return MemoryCache(ttl=settings.cache_ttl, maxsize=settings.cache_max_entries)
    if settings.cache_backend == "null":
        return NullCache(ttl=settings.cache_ttl)
    return RedisCache(settings.redis_url, ttl=settings.cache_ttl)


_cache: Optional[Cache] = None


def get_cache() -> Cache:
    """
    Get the process-wide cache, building it on first use.

    Routers receive it through the AppCache dependency, so tests can
    swap in their own backend with app.dependency_overrides.
    """
    global _cache

    if _cache is None:
        _cache = build_cache(get_settings())
    return _cache


def close_cache() -> None:
    """Close the process-wide cache on shutdown."""
    global _cache
    if _cache is not None:
        _cache.close()
        _cache = None


# =============================================================================
# Cache Key Generation
# =============================================================================

AUTHORS_ALL_KEY = "authors.all"
BOOKS_ALL_KEY = "books.all"


def make_cache_key(prefix: str, *args) -> str:
    """
    Generate a cache key from a prefix and arguments.

    Examples:
        make_cache_key("author", 1) -> "author.1"
        make_cache_key("books", "author", 7) -> "books.author.7"
    """
    parts = [prefix]
    for arg in args:
        if arg is not None:
            parts.append(str(arg))
    return ".".join(parts)


def author_key(author_id: int) -> str:
    return make_cache_key("author", author_id)


def book_key(book_id: int) -> str:
    return make_cache_key("book", book_id)


def author_books_key(author_id: int) -> str:
    return make_cache_key("books", "author", author_id)


# =============================================================================
# Cache Invalidation Helpers
# =============================================================================

def forget_keys(cache: Cache, keys: Iterable[str]) -> list[str]:
    """
    Forget each key once, in order, skipping duplicates.

    Returns:
        The keys that were forgotten
    """
    forgotten: list[str] = []
    for key in keys:
        if key not in forgotten:
            cache.forget(key)
            forgotten.append(key)
    return forgotten


def invalidate_author_cache(cache: Cache, author_id: Optional[int] = None) -> list[str]:
    """
    Invalidate author-related caches.

    Called when an author is created, updated, or deleted.

    Args:
        cache: Cache backend
        author_id: Author whose single-record entry is outdated, if any
    """
    keys = [AUTHORS_ALL_KEY]
    if author_id is not None:
        keys.append(author_key(author_id))
    return forget_keys(cache, keys)


def invalidate_book_cache(
    cache: Cache,
    *author_ids: Optional[int],
    book_ids: Iterable[int] = (),
) -> list[str]:
    """
    Invalidate book-related caches.

    Called when a book is created, updated, or deleted, and when an
    author delete cascades to the author's books.

    Args:
        cache: Cache backend
        *author_ids: Authors whose book lists are outdated. On an update
            pass both the previous and the new author; equal ids are
            only forgotten once.
        book_ids: Books whose single-record entries are outdated
    """
    keys = [BOOKS_ALL_KEY]
    keys.extend(author_books_key(a) for a in author_ids if a is not None)
    keys.extend(book_key(b) for b in book_ids)
    return forget_keys(cache, keys)
