"""
Test Suite for Bookshelf API

Test Organization:
- conftest.py: Shared fixtures (test database, cache, client, sample data)
- test_authors.py: Tests for /api/v1/authors endpoints
- test_books.py: Tests for /api/v1/books and /api/v1/authors/{id}/books
- test_cache.py: Tests for the cache backends, keys and invalidation helpers
- test_cache_invalidation.py: End-to-end checks that writes never leave stale reads
- test_errors.py: Error envelope and 500 handling
- test_config.py: Settings validation
- test_main.py: Health and root endpoints

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
