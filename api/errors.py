"""
Error taxonomy for the favorites API.

Controller operations raise these; each HTTP handler converts them into a
status code and message at its own boundary.
"""

from fastapi import status


class FavoritesError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FavoritesError):
    """A required field is missing from the request."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(FavoritesError):
    """A referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(FavoritesError):
    """The favorite already exists for this user."""
    status_code = status.HTTP_409_CONFLICT


class InternalError(FavoritesError):
    """Anything else. Never carries the underlying detail."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
