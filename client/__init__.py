"""
Client package for the Book Catalogue API.

This package contains:
- HTTP client for the books and favorites endpoints
- Favorite-book state kept for a UI
- Notification sinks for user-facing messages
"""

__version__ = "1.0.0"
