"""
Async HTTP client for the books and favorites endpoints.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from utilities.config import config

logger = structlog.get_logger(__name__)


class BookService:
    """
    Thin wrapper over the Book Catalogue API.

    Non-2xx responses raise ``httpx.HTTPStatusError``; transport failures
    propagate as ``httpx.RequestError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the service.

        Args:
            base_url: API root, defaults to the configured one
            token: Bearer token, defaults to the configured one
            timeout: Request timeout in seconds
            transport: Custom httpx transport, mainly for tests
        """
        headers = config.get_headers()
        token = token if token is not None else config.api_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            headers.pop("Authorization", None)

        self.client_config = {
            "base_url": base_url or config.api_base_url,
            "timeout": timeout or config.request_timeout,
            "headers": headers,
            "follow_redirects": True,
        }
        if transport is not None:
            self.client_config["transport"] = transport

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        async with httpx.AsyncClient(**self.client_config) as client:
            response = await client.request(method, url, **kwargs)
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError:
                logger.warning(
                    "API request failed",
                    method=method,
                    url=url,
                    status_code=response.status_code
                )
                raise
            return response.json()

    async def get_favorite_books(self) -> Dict[str, Any]:
        """Fetch the signed-in user's favorites as ``{"message", "books"}``."""
        return await self._request("GET", "/favorites")

    async def add_favorite(self, book_id: str) -> Dict[str, Any]:
        """Add a book to the signed-in user's favorites."""
        return await self._request("POST", "/favorites", json={"bookId": book_id})

    async def delete_favorite(self, book_id: str) -> Dict[str, Any]:
        """Remove a book from the signed-in user's favorites."""
        return await self._request("DELETE", "/favorites", params={"bookId": book_id})

    async def get_book(self, book_id: str) -> Dict[str, Any]:
        """Fetch a single book record."""
        return await self._request("GET", f"/books/{book_id}")
