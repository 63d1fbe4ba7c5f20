"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BookResponse(BaseModel):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field("", description="Book author")
    description: str = Field("", description="Book description")

    model_config = ConfigDict(extra="allow")


class BookListResponse(BaseModel):
    """Response model for book list with pagination."""
    books: List[BookResponse] = Field(..., description="List of books")
    total: int = Field(..., description="Total number of books")
    page: int = Field(..., description="Current page number")
    per_page: int = Field(..., description="Number of books per page")
    total_pages: int = Field(..., description="Total number of pages")
    has_next: bool = Field(..., description="Whether there is a next page")
    has_prev: bool = Field(..., description="Whether there is a previous page")


class BookQueryParams(BaseModel):
    """Query parameters for book listing."""
    page: int = Field(1, ge=1, description="Page number")
    per_page: int = Field(20, ge=1, le=100, description="Items per page")


class FavoriteCreate(BaseModel):
    """Request body for adding a favorite."""
    book_id: Optional[str] = Field(None, alias="bookId", description="Book to favorite")

    model_config = ConfigDict(populate_by_name=True)


class FavoriteRecord(BaseModel):
    """A (user, book) favorite membership record."""
    id: str = Field(..., description="Record identifier")
    user_id: str = Field(..., alias="userId", description="Owning user")
    book_id: str = Field(..., alias="bookId", description="Favorited book")
    created_at: Optional[str] = Field(None, alias="createdAt", description="Creation timestamp")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str = Field(..., description="Human-readable result")


class FavoriteDeleteResponse(MessageResponse):
    """Acknowledgement carrying the removed record."""
    favorite: FavoriteRecord = Field(..., description="The deleted favorite record")


class FavoriteListResponse(MessageResponse):
    """The books a user has favorited."""
    books: List[BookResponse] = Field(..., description="Favorited books")


class UserResponse(BaseModel):
    """Authenticated user profile."""
    id: str = Field(..., description="User identifier")
    username: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")


class AuthenticatedResponse(MessageResponse):
    """Result of resolving the caller's identity."""
    user: UserResponse


class ErrorResponse(BaseModel):
    """Error response model."""
    message: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a MongoDB document into JSON-friendly primitives.

    ``_id`` becomes ``id``; ObjectId values become strings and datetimes
    become ISO-8601 strings.
    """
    from bson import ObjectId

    result = {}
    for key, value in doc.items():
        if key == "_id":
            key = "id"
        if isinstance(value, ObjectId):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        result[key] = value
    return result
