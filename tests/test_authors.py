"""
Tests for Authors API Endpoints

Tests for /api/v1/authors endpoints.
"""

import pytest
from fastapi import status
from sqlalchemy import select

from bookshelf.models import Author, Book

AUTHOR_FIELDS = {"id", "name", "bio", "birth_date"}

# Past the 32-bit Integer primary key column, and past SQLite's 64-bit one
OUT_OF_RANGE_IDS = [3_000_000_000, 2**70]


class TestListAuthors:
    """Tests for GET /api/v1/authors endpoint."""

    def test_list_authors_empty(self, client):
        """Test listing authors when database is empty."""
        response = client.get("/api/v1/authors")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_authors_with_data(self, client, sample_author, second_author):
        """Test listing authors returns every author without timestamps."""
        response = client.get("/api/v1/authors")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [a["name"] for a in data] == ["George Orwell", "Jane Austen"]
        assert set(data[0]) == AUTHOR_FIELDS
        assert data[0]["birth_date"] == "1903-06-25"


class TestGetAuthor:
    """Tests for GET /api/v1/authors/{author_id} endpoint."""

    def test_get_author_success(self, client, sample_author):
        """Test getting an author by ID."""
        response = client.get(f"/api/v1/authors/{sample_author.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "id": sample_author.id,
            "name": "George Orwell",
            "bio": "English novelist and essayist, journalist and critic.",
            "birth_date": "1903-06-25",
        }

    def test_get_author_not_found(self, client):
        """Test getting a non-existent author returns 404."""
        response = client.get("/api/v1/authors/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Author not found"}

    def test_get_author_invalid_id(self, client):
        """Test that a non-integer ID is a validation error."""
        response = client.get("/api/v1/authors/abc")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "author_id" in response.json()["error"]


class TestCreateAuthor:
    """Tests for POST /api/v1/authors endpoint."""

    def test_create_author_minimal(self, client):
        """Test creating an author with only required fields."""
        author_data = {"name": "Jane Austen", "birth_date": "1775-12-16"}

        response = client.post("/api/v1/authors", json=author_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert set(data) == AUTHOR_FIELDS
        assert data["name"] == "Jane Austen"
        assert data["bio"] is None
        assert data["birth_date"] == "1775-12-16"

    def test_create_then_get_matches_input(self, client):
        """Test a created author reads back with the submitted fields."""
        author_data = {
            "name": "Ernest Hemingway",
            "bio": "American novelist and journalist.",
            "birth_date": "1899-07-21",
        }

        created = client.post("/api/v1/authors", json=author_data).json()
        response = client.get(f"/api/v1/authors/{created['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": created["id"], **author_data}

    def test_create_author_persists(self, client, db_session):
        """Test the author is written to the database."""
        response = client.post(
            "/api/v1/authors",
            json={"name": "Agatha Christie", "birth_date": "1890-09-15"},
        )

        author = db_session.get(Author, response.json()["id"])
        assert author is not None
        assert author.name == "Agatha Christie"

    def test_create_author_missing_fields(self, client):
        """Test that missing required fields are reported per field."""
        response = client.post("/api/v1/authors", json={})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        errors = response.json()["error"]
        assert set(errors) == {"name", "birth_date"}
        assert all(isinstance(messages, list) for messages in errors.values())

    def test_create_author_empty_name(self, client):
        """Test that a whitespace-only name is rejected."""
        response = client.post(
            "/api/v1/authors",
            json={"name": "   ", "birth_date": "1990-01-01"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"]["name"] == ["Name cannot be empty or whitespace"]

    def test_create_author_name_too_long(self, client):
        """Test that names over 255 characters are rejected."""
        response = client.post(
            "/api/v1/authors",
            json={"name": "x" * 256, "birth_date": "1990-01-01"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "name" in response.json()["error"]

    def test_create_author_invalid_birth_date(self, client):
        """Test that an invalid date is rejected."""
        response = client.post(
            "/api/v1/authors",
            json={"name": "Someone", "birth_date": "not-a-date"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert list(response.json()["error"]) == ["birth_date"]

    def test_create_author_bio_must_be_string(self, client):
        """Test that a non-string bio is rejected."""
        response = client.post(
            "/api/v1/authors",
            json={"name": "Someone", "bio": 42, "birth_date": "1990-01-01"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "bio" in response.json()["error"]


class TestUpdateAuthor:
    """Tests for PUT/PATCH /api/v1/authors/{author_id} endpoint."""

    def test_update_author(self, client, sample_author):
        """Test replacing author fields with PUT."""
        update_data = {
            "name": "Eric Arthur Blair",
            "bio": None,
            "birth_date": "1903-06-25",
        }

        response = client.put(f"/api/v1/authors/{sample_author.id}", json=update_data)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": sample_author.id, **update_data}

    def test_patch_uses_same_rules(self, client, sample_author):
        """Test PATCH updates but still requires the full payload."""
        response = client.patch(
            f"/api/v1/authors/{sample_author.id}",
            json={"name": "Eric Blair", "birth_date": "1903-06-25"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Eric Blair"

        response = client.patch(
            f"/api/v1/authors/{sample_author.id}",
            json={"name": "Eric Blair"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "birth_date" in response.json()["error"]

    def test_update_then_get_reflects_new_values(self, client, sample_author):
        """Test a cached author is refreshed after an update."""
        client.get(f"/api/v1/authors/{sample_author.id}")  # warm the cache

        client.put(
            f"/api/v1/authors/{sample_author.id}",
            json={"name": "Eric Arthur Blair", "birth_date": "1903-06-25"},
        )
        response = client.get(f"/api/v1/authors/{sample_author.id}")

        assert response.json()["name"] == "Eric Arthur Blair"
        assert response.json()["bio"] is None

    def test_update_author_invalid_data(self, client, sample_author):
        """Test that invalid update data is rejected."""
        response = client.put(f"/api/v1/authors/{sample_author.id}", json={})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_update_author_not_found(self, client):
        """Test updating a non-existent author returns 404."""
        response = client.put(
            "/api/v1/authors/99999",
            json={"name": "Updated", "birth_date": "1990-01-01"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Author not found"}


class TestDeleteAuthor:
    """Tests for DELETE /api/v1/authors/{author_id} endpoint."""

    def test_delete_author_success(self, client, sample_author):
        """Test deleting an author successfully."""
        response = client.delete(f"/api/v1/authors/{sample_author.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response.content == b""

        get_response = client.get(f"/api/v1/authors/{sample_author.id}")
        assert get_response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_author_removed_from_list(self, client, sample_author, second_author):
        """Test a deleted author disappears from a previously cached list."""
        client.get("/api/v1/authors")  # warm the cache

        client.delete(f"/api/v1/authors/{sample_author.id}")
        response = client.get("/api/v1/authors")

        assert [a["id"] for a in response.json()] == [second_author.id]

    def test_delete_author_not_found(self, client):
        """Test deleting a non-existent author returns 404."""
        response = client.delete("/api/v1/authors/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Author not found"}

    def test_delete_author_deletes_books(self, client, db_session, author_with_books, second_author):
        """Test deleting an author removes the author's books as well."""
        response = client.delete(f"/api/v1/authors/{author_with_books.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT

        remaining = client.get("/api/v1/books").json()
        assert {b["author_id"] for b in remaining} == {second_author.id}
        assert len(remaining) == 2

        stmt = select(Book).where(Book.author_id == author_with_books.id)
        assert db_session.execute(stmt).scalars().all() == []


class TestAuthorIdRange:
    """Ids no row can have are missing records, not server errors."""

    @pytest.mark.parametrize("author_id", OUT_OF_RANGE_IDS)
    def test_get_author_out_of_range(self, client, author_id):
        response = client.get(f"/api/v1/authors/{author_id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Author not found"}

    @pytest.mark.parametrize("author_id", OUT_OF_RANGE_IDS)
    def test_update_author_out_of_range(self, client, author_id):
        response = client.put(
            f"/api/v1/authors/{author_id}",
            json={"name": "Updated", "birth_date": "1990-01-01"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize("author_id", OUT_OF_RANGE_IDS)
    def test_delete_author_out_of_range(self, client, author_id):
        response = client.delete(f"/api/v1/authors/{author_id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Author not found"}

    def test_zero_and_negative_ids_not_found(self, client):
        assert client.get("/api/v1/authors/0").status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/api/v1/authors/-1").status_code == status.HTTP_404_NOT_FOUND
