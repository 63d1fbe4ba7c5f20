"""
FastAPI RESTful API for the Book Catalogue.

This module provides a REST API for:
- Book catalogue browsing
- Per-user favorite books
- Bearer token identity
"""
