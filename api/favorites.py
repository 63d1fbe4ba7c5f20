"""
Favorites controller: add, remove and list a user's favorite books.

The acting user is always passed in explicitly. Failures are raised as
``api.errors`` exceptions; unexpected store failures are logged and masked
as ``InternalError``.
"""

from typing import Optional

import structlog
from pymongo.errors import DuplicateKeyError

from api.database import APIDatabaseService, to_object_id
from api.errors import Conflict, FavoritesError, InternalError, NotFound, ValidationError
from api.models import (
    FavoriteDeleteResponse, FavoriteListResponse, FavoriteRecord,
    MessageResponse, serialize_document
)

logger = structlog.get_logger(__name__)


class FavoritesController:
    """Translates favorites requests into store operations."""

    def __init__(self, db_service: APIDatabaseService):
        self.db_service = db_service
        self.logger = logger.bind(component="favorites_controller")

    async def add(self, user_id: str, book_id: Optional[str]) -> MessageResponse:
        """
        Add a book to the user's favorites.

        Raises:
            ValidationError: book_id missing
            NotFound: no such book
            Conflict: the book is already a favorite
            InternalError: store failure
        """
        if not book_id or not book_id.strip():
            raise ValidationError("Please Select A Book To Add To Favorite")

        try:
            book = await self.db_service.get_book_by_id(book_id)
            if not book:
                raise NotFound("Book not found")

            try:
                await self.db_service.insert_favorite(user_id, to_object_id(book.id))
            except DuplicateKeyError:
                raise Conflict("Book is already in your favorites")

        except FavoritesError:
            raise
        except Exception as e:
            self.logger.error("Failed to add favorite", user_id=user_id, book_id=book_id, error=str(e))
            raise InternalError()

        self.logger.info("Favorite added", user_id=user_id, book_id=book_id)
        return MessageResponse(message="Book is now in your favorites")

    async def remove(self, user_id: str, book_id: Optional[str]) -> FavoriteDeleteResponse:
        """
        Remove a book from the user's favorites.

        Raises:
            ValidationError: book_id missing
            NotFound: no such book, or the book is not a favorite
            InternalError: store failure
        """
        if not book_id or not book_id.strip():
            raise ValidationError("Please Select A Book To Remove From Your Favorite")

        try:
            book = await self.db_service.get_book_by_id(book_id)
            if not book:
                raise NotFound("Book not found")

            record = await self.db_service.delete_favorite(user_id, to_object_id(book.id))
            if not record:
                raise NotFound("This book is not in your favorites")

        except FavoritesError:
            raise
        except Exception as e:
            self.logger.error("Failed to remove favorite", user_id=user_id, book_id=book_id, error=str(e))
            raise InternalError()

        self.logger.info("Favorite removed", user_id=user_id, book_id=book_id)
        return FavoriteDeleteResponse(
            message="Book is removed from your favorites",
            favorite=FavoriteRecord(**serialize_document(record))
        )

    async def list(self, user_id: str) -> FavoriteListResponse:
        """
        List every book the user has favorited.

        Raises:
            InternalError: store failure
        """
        try:
            book_ids = await self.db_service.get_favorite_book_ids(user_id)
            books = await self.db_service.get_books_by_ids(book_ids)
        except Exception as e:
            self.logger.error("Failed to list favorites", user_id=user_id, error=str(e))
            raise InternalError()

        return FavoriteListResponse(message="Success", books=books)
