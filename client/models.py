"""
Pydantic models for books as seen by the client.
"""

from pydantic import BaseModel, ConfigDict, Field


class FavoriteBook(BaseModel):
    """
    A book plus the client-side membership flag.

    Attributes other than ``id`` are carried as the server sent them,
    including ones this model does not declare.
    """
    id: str = Field(..., description="Book identifier")
    title: str = Field("", description="Book title")
    author: str = Field("", description="Book author")
    description: str = Field("", description="Book description")
    is_favorite: bool = Field(False, alias="isFavorite", description="Whether the book is a favorite")

    model_config = ConfigDict(extra="allow", populate_by_name=True)
