"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime
from typing import Optional
from unittest.mock import AsyncMock, patch

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from api.auth import get_current_user_id
from api.database import APIDatabaseService, to_object_id
from api.main import app
from api.models import BookResponse, serialize_document
from sample_data import BOOK_ID_1, BOOK_ID_2, BOOK_ID_3


class InMemoryDatabaseService:
    """Dictionary-backed stand-in for APIDatabaseService."""

    def __init__(self, books):
        self.books = {book["_id"]: book for book in books}
        self.favorites = []

    async def get_book_by_id(self, book_id: str) -> Optional[BookResponse]:
        object_id = to_object_id(book_id)
        doc = self.books.get(object_id) if object_id else None
        return BookResponse(**serialize_document(doc)) if doc else None

    async def get_books_by_ids(self, book_ids):
        return [
            BookResponse(**serialize_document(self.books[book_id]))
            for book_id in book_ids if book_id in self.books
        ]

    async def insert_favorite(self, user_id, book_id):
        for record in self.favorites:
            if record["user_id"] == user_id and record["book_id"] == book_id:
                raise DuplicateKeyError("E11000 duplicate key error collection: favorites")
        record = {
            "_id": ObjectId(),
            "user_id": user_id,
            "book_id": book_id,
            "created_at": datetime.utcnow()
        }
        self.favorites.append(record)
        return record

    async def delete_favorite(self, user_id, book_id):
        for record in self.favorites:
            if record["user_id"] == user_id and record["book_id"] == book_id:
                self.favorites.remove(record)
                return record
        return None

    async def get_favorite_book_ids(self, user_id):
        return [record["book_id"] for record in self.favorites if record["user_id"] == user_id]

    async def get_user_by_id(self, user_id):
        return None

    async def health_check(self):
        return {"status": "healthy"}


@pytest.fixture
def sample_book_docs():
    """Book documents as stored in MongoDB."""
    return [
        {"_id": ObjectId(BOOK_ID_1), "title": "T1", "author": "A1", "description": "D1"},
        {"_id": ObjectId(BOOK_ID_2), "title": "T2", "author": "A2", "description": "D2"},
        {"_id": ObjectId(BOOK_ID_3), "title": "T3", "author": "A3", "description": "D3"},
    ]


@pytest.fixture
def memory_db(sample_book_docs):
    """In-memory store preloaded with the sample books and no favorites."""
    return InMemoryDatabaseService(sample_book_docs)


@pytest.fixture
def mock_db_service():
    """Mock database service."""
    return AsyncMock(spec=APIDatabaseService)


@pytest.fixture
def make_test_client():
    """
    Build a TestClient with a preloaded user identity and store.

    ``user_id=None`` leaves the real bearer-token dependency in place.
    """
    patches = []

    def _make(user_id: Optional[str] = "user-1", db_service=None) -> TestClient:
        if user_id is not None:
            app.dependency_overrides[get_current_user_id] = lambda: user_id
        db_patch = patch('api.main.db_service', db_service)
        db_patch.start()
        patches.append(db_patch)
        return TestClient(app)

    yield _make

    for db_patch in reversed(patches):
        db_patch.stop()
    app.dependency_overrides.clear()
