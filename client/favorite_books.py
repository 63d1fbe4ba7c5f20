"""
Client-side favorite-book state.

Holds the signed-in user's favorite books for a UI and toggles membership
through the API. The list is only changed after the API call it depends
on has succeeded, so it always reflects the last confirmed server state.
"""

from typing import List, Optional

import structlog

from client.book_service import BookService
from client.models import FavoriteBook
from client.notifications import (
    ADDED_MESSAGE, FAILED_MESSAGE, REMOVED_MESSAGE, LogNotifier, Notifier
)

logger = structlog.get_logger(__name__)


def as_favorite(book: dict) -> FavoriteBook:
    """Build a view model from a server book, flagged as a favorite."""
    data = {key: value for key, value in book.items() if key not in ("isFavorite", "is_favorite")}
    return FavoriteBook(**data, isFavorite=True)


class FavoriteBooks:
    """
    Favorite-book state container.

    Concurrent toggles are not serialised: if two toggles for the same book
    overlap, whichever response resolves last decides the final state.
    """

    def __init__(self, book_service: BookService, notifier: Optional[Notifier] = None):
        """
        Initialize the container.

        Args:
            book_service: API client used for every request
            notifier: Sink for user-facing messages
        """
        self.book_service = book_service
        self.notifier = notifier or LogNotifier()
        self.books: List[FavoriteBook] = []
        self.last_error: Optional[Exception] = None
        self._activated = False

    async def activate(self) -> None:
        """Load favorites on first activation; later calls do nothing."""
        if self._activated:
            return
        self._activated = True
        await self.load()

    async def load(self) -> None:
        """
        Replace the list with the user's favorites from the API.

        Every fetched entry is marked ``is_favorite=True`` whatever the
        server sent. Failures are logged and kept in ``last_error``; the
        list is left as it was and nothing is shown to the user.
        """
        try:
            payload = await self.book_service.get_favorite_books()
            books = [as_favorite(book) for book in payload.get("books", [])]
        except Exception as e:
            self.last_error = e
            logger.error("Failed to load favorite books", error=str(e))
            return

        self.last_error = None
        self.books = books
        logger.debug("Loaded favorite books", count=len(self.books))

    def find(self, book_id: str) -> Optional[FavoriteBook]:
        """Get the entry for a book id, if present."""
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    async def toggle_favorite(self, book_id: str, is_currently_favorite: bool) -> bool:
        """
        Add or remove a favorite depending on the caller's current flag.

        The flag is trusted as given; it is not checked against ``books``.

        Args:
            book_id: Book to toggle
            is_currently_favorite: True to remove, False to add

        Returns:
            True if the API call succeeded, False otherwise
        """
        try:
            if is_currently_favorite:
                await self.book_service.delete_favorite(book_id)
            else:
                await self.book_service.add_favorite(book_id)
        except Exception as e:
            logger.error(
                "Failed to update favorite",
                book_id=book_id,
                removing=is_currently_favorite,
                error=str(e)
            )
            self.notifier.error(FAILED_MESSAGE)
            return False

        if is_currently_favorite:
            self.books = [book for book in self.books if book.id != book_id]
            self.notifier.info(REMOVED_MESSAGE)
        else:
            await self._mark_favorite(book_id)
            self.notifier.success(ADDED_MESSAGE)
        return True

    async def _mark_favorite(self, book_id: str) -> None:
        existing = self.find(book_id)
        if existing:
            existing.is_favorite = True
            return

        # The add already succeeded; if the record can't be fetched the
        # entry appears on the next load instead.
        try:
            book = await self.book_service.get_book(book_id)
        except Exception as e:
            logger.warning("Failed to fetch added favorite", book_id=book_id, error=str(e))
            return

        # A load may have replaced the list while the book was being fetched.
        existing = self.find(book_id)
        if existing:
            existing.is_favorite = True
            return
        self.books.append(as_favorite(book))
