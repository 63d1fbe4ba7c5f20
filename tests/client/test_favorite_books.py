"""
Tests for the client-side favorite-book state.
"""

from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

from client.book_service import BookService
from client.favorite_books import FavoriteBooks
from client.notifications import ADDED_MESSAGE, FAILED_MESSAGE, REMOVED_MESSAGE

B1 = {"id": "b1", "title": "T1", "author": "A1", "description": "D1"}
B2 = {"id": "b2", "title": "T2", "author": "A2", "description": "D2"}


@pytest.fixture
def book_service():
    return AsyncMock(spec=BookService)


@pytest.fixture
def notifier():
    return Mock()


@pytest.fixture
def favorites(book_service, notifier):
    return FavoriteBooks(book_service, notifier)


def dump(favorites):
    return [book.model_dump(by_alias=True) for book in favorites.books]


class TestLoad:
    """Loading favorites on activation."""

    @pytest.mark.asyncio
    async def test_loads_and_marks_every_book_favorite(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"message": "Success", "books": [B1, B2]}

        await favorites.activate()

        assert dump(favorites) == [{**B1, "isFavorite": True}, {**B2, "isFavorite": True}]
        book_service.get_favorite_books.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_overrides_server_flag(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"books": [{**B1, "isFavorite": False}]}

        await favorites.load()

        assert favorites.books[0].is_favorite is True

    @pytest.mark.asyncio
    async def test_keeps_extra_attributes(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"books": [{**B1, "year": 1999}]}

        await favorites.load()

        assert dump(favorites)[0]["year"] == 1999

    @pytest.mark.asyncio
    async def test_activates_once(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"books": [B1]}

        await favorites.activate()
        await favorites.activate()

        book_service.get_favorite_books.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_load_failure_is_recorded_not_notified(self, favorites, book_service, notifier):
        error = RuntimeError("boom")
        book_service.get_favorite_books.side_effect = error

        await favorites.activate()

        assert favorites.books == []
        assert favorites.last_error is error
        notifier.error.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"books": None},
        {"books": [{"title": "no id"}]},
        {"books": [B1, {"title": "no id"}]},
    ])
    async def test_malformed_payload_is_recorded(self, favorites, book_service, notifier, payload):
        book_service.get_favorite_books.return_value = payload

        await favorites.activate()

        assert favorites.books == []
        assert favorites.last_error is not None
        notifier.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_reload_keeps_previous_list(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"books": [B1]}
        await favorites.load()
        book_service.get_favorite_books.return_value = {"books": [B2, {"title": "no id"}]}

        await favorites.load()

        assert [book.id for book in favorites.books] == ["b1"]
        assert favorites.last_error is not None

    @pytest.mark.asyncio
    async def test_load_twice_without_changes_is_equal(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"books": [B1, B2]}

        await favorites.load()
        first = dump(favorites)
        await favorites.load()

        assert dump(favorites) == first


class TestToggleFavorite:
    """Adding and removing through toggle_favorite."""

    @pytest_asyncio.fixture
    async def loaded(self, favorites, book_service):
        book_service.get_favorite_books.return_value = {"books": [B1, B2]}
        await favorites.activate()
        return favorites

    @pytest.mark.asyncio
    async def test_removes_current_favorite(self, loaded, book_service, notifier):
        assert await loaded.toggle_favorite("b1", True) is True

        book_service.delete_favorite.assert_awaited_once_with("b1")
        notifier.info.assert_called_once_with(REMOVED_MESSAGE)
        assert [book.id for book in loaded.books] == ["b2"]
        assert loaded.books[0].is_favorite is True

    @pytest.mark.asyncio
    async def test_adds_present_book(self, loaded, book_service, notifier):
        loaded.books[0].is_favorite = False

        assert await loaded.toggle_favorite("b1", False) is True

        book_service.add_favorite.assert_awaited_once_with("b1")
        notifier.success.assert_called_once_with(ADDED_MESSAGE)
        assert loaded.books[0].model_dump(by_alias=True) == {**B1, "isFavorite": True}
        book_service.get_book.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_adds_absent_book(self, loaded, book_service, notifier):
        b3 = {"id": "b3", "title": "T3", "author": "A3", "description": "D3"}
        book_service.get_book.return_value = b3

        await loaded.toggle_favorite("b3", False)

        book_service.get_book.assert_awaited_once_with("b3")
        assert dump(loaded)[-1] == {**b3, "isFavorite": True}
        notifier.success.assert_called_once_with(ADDED_MESSAGE)

    @pytest.mark.asyncio
    async def test_adds_absent_book_once_when_reloaded_during_fetch(self, loaded, book_service):
        b3 = {"id": "b3", "title": "T3", "author": "A3", "description": "D3"}
        book_service.get_favorite_books.return_value = {"books": [B1, B2, b3]}

        async def fetch_with_reload(book_id):
            await loaded.load()
            return b3

        book_service.get_book.side_effect = fetch_with_reload

        assert await loaded.toggle_favorite("b3", False) is True

        assert [book.id for book in loaded.books] == ["b1", "b2", "b3"]
        assert loaded.find("b3").is_favorite is True

    @pytest.mark.asyncio
    async def test_add_succeeds_when_book_fetch_fails(self, loaded, book_service, notifier):
        book_service.get_book.side_effect = RuntimeError("gone")
        before = dump(loaded)

        assert await loaded.toggle_favorite("b3", False) is True

        assert dump(loaded) == before
        notifier.success.assert_called_once_with(ADDED_MESSAGE)

    @pytest.mark.asyncio
    async def test_add_failure_leaves_state(self, loaded, book_service, notifier):
        book_service.add_favorite.side_effect = RuntimeError("nope")
        before = dump(loaded)

        assert await loaded.toggle_favorite("b1", False) is False

        notifier.error.assert_called_once_with(FAILED_MESSAGE)
        notifier.success.assert_not_called()
        assert dump(loaded) == before

    @pytest.mark.asyncio
    async def test_remove_failure_leaves_state(self, loaded, book_service, notifier):
        book_service.delete_favorite.side_effect = RuntimeError("nope")
        before = dump(loaded)

        assert await loaded.toggle_favorite("b1", True) is False

        notifier.error.assert_called_once_with(FAILED_MESSAGE)
        notifier.info.assert_not_called()
        assert dump(loaded) == before

    @pytest.mark.asyncio
    async def test_trusts_caller_flag(self, loaded, book_service):
        # b1 is a favorite, but the caller says it isn't
        await loaded.toggle_favorite("b1", False)

        book_service.add_favorite.assert_awaited_once_with("b1")
        book_service.delete_favorite.assert_not_awaited()
