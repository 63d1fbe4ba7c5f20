"""
Database service layer for the FastAPI application.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from api.config import config
from api.models import BookListResponse, BookQueryParams, BookResponse, serialize_document

logger = structlog.get_logger(__name__)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse an identifier, returning None when it is not a valid ObjectId."""
    # ObjectId(None) would mint a fresh id
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class APIDatabaseService:
    """Database service for API operations."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database
        self.books_collection = database[config.books_collection]
        self.favorites_collection = database[config.favorites_collection]
        self.users_collection = database[config.users_collection]

    async def ensure_indexes(self) -> None:
        """
        Create the indexes the favorites contract depends on.

        The unique compound index makes inserting a duplicate (user, book)
        pair fail atomically, so no read-then-write check is needed.
        """
        try:
            await self.favorites_collection.create_index(
                [("user_id", ASCENDING), ("book_id", ASCENDING)],
                unique=True,
                name="user_book_unique"
            )
            await self.favorites_collection.create_index("user_id")
            logger.info("Successfully created MongoDB indexes")
        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def get_books(self, query_params: BookQueryParams) -> BookListResponse:
        """
        Get books with pagination, ordered by title.

        Args:
            query_params: Pagination parameters

        Returns:
            BookListResponse with paginated results
        """
        try:
            skip = (query_params.page - 1) * query_params.per_page

            total = await self.books_collection.count_documents({})
            total_pages = math.ceil(total / query_params.per_page)

            cursor = self.books_collection.find({}).sort("title", ASCENDING).skip(skip).limit(query_params.per_page)
            books_docs = await cursor.to_list(length=query_params.per_page)

            return BookListResponse(
                books=[BookResponse(**serialize_document(doc)) for doc in books_docs],
                total=total,
                page=query_params.page,
                per_page=query_params.per_page,
                total_pages=total_pages,
                has_next=query_params.page < total_pages,
                has_prev=query_params.page > 1
            )

        except Exception as e:
            logger.error("Failed to get books", error=str(e), query_params=query_params.model_dump())
            raise

    async def get_book_by_id(self, book_id: str) -> Optional[BookResponse]:
        """
        Get a single book by ID.

        Args:
            book_id: Book identifier

        Returns:
            BookResponse if found, None otherwise (including malformed ids)
        """
        object_id = to_object_id(book_id)
        if object_id is None:
            return None

        try:
            book_doc = await self.books_collection.find_one({"_id": object_id})
        except Exception as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise

        if book_doc:
            return BookResponse(**serialize_document(book_doc))
        return None

    async def get_books_by_ids(self, book_ids: List[ObjectId]) -> List[BookResponse]:
        """
        Get the books for a list of ids.

        Args:
            book_ids: Book ObjectIds

        Returns:
            Books in the order of ``book_ids``; ids with no book are skipped
        """
        if not book_ids:
            return []

        try:
            cursor = self.books_collection.find({"_id": {"$in": book_ids}})
            books_docs = await cursor.to_list(length=None)
        except Exception as e:
            logger.error("Failed to get books by IDs", count=len(book_ids), error=str(e))
            raise

        by_id = {doc["_id"]: doc for doc in books_docs}
        books = []
        for book_id in book_ids:
            doc = by_id.get(book_id)
            if doc is None:
                logger.warning("Favorite references a missing book", book_id=str(book_id))
                continue
            books.append(BookResponse(**serialize_document(doc)))
        return books

    async def insert_favorite(self, user_id: str, book_id: ObjectId) -> Dict[str, Any]:
        """
        Insert a favorite record.

        Raises:
            pymongo.errors.DuplicateKeyError: If the pair already exists
        """
        record = {
            "user_id": user_id,
            "book_id": book_id,
            "created_at": datetime.utcnow()
        }
        result = await self.favorites_collection.insert_one(record)
        record["_id"] = result.inserted_id
        logger.debug("Inserted favorite", user_id=user_id, book_id=str(book_id))
        return record

    async def delete_favorite(self, user_id: str, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        Delete a favorite record in a single conditional operation.

        Returns:
            The deleted record, or None if there was none
        """
        record = await self.favorites_collection.find_one_and_delete(
            {"user_id": user_id, "book_id": book_id}
        )
        if record:
            logger.debug("Deleted favorite", user_id=user_id, book_id=str(book_id))
        return record

    async def get_favorite_book_ids(self, user_id: str) -> List[ObjectId]:
        """Get the book ids a user has favorited, in store order."""
        cursor = self.favorites_collection.find({"user_id": user_id}, {"book_id": 1})
        docs = await cursor.to_list(length=None)
        return [doc["book_id"] for doc in docs]

    async def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user document by its id."""
        object_id = to_object_id(user_id)
        user_doc = await self.users_collection.find_one(
            {"_id": object_id if object_id is not None else user_id}
        )
        if user_doc:
            return serialize_document(user_doc)
        return None

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            # Test basic connectivity
            await self.database.command("ping")

            books_count = await self.books_collection.count_documents({})
            favorites_count = await self.favorites_collection.count_documents({})

            return {
                "status": "healthy",
                "books_collection": "accessible",
                "favorites_collection": "accessible",
                "books_count": books_count,
                "favorites_count": favorites_count
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
