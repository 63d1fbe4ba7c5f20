"""
FastAPI main application for the Book Catalogue API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import structlog
from fastapi import Body, Depends, FastAPI, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from api.auth import get_current_user_id
from api.config import config as api_config
from api.database import APIDatabaseService
from api.errors import FavoritesError, InternalError
from api.favorites import FavoritesController
from api.models import (
    AuthenticatedResponse, BookListResponse, BookQueryParams, BookResponse,
    ErrorResponse, FavoriteCreate, FavoriteDeleteResponse, FavoriteListResponse,
    HealthResponse, MessageResponse, UserResponse
)
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)

# Global database service
db_service: APIDatabaseService = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging(
        log_level=api_config.log_level,
        log_format=api_config.log_format,
        log_file=api_config.log_file,
        debug=api_config.debug
    )
    logger.info("Starting Book Catalogue API")

    # Initialize database connection
    global db_service
    try:
        client = AsyncIOMotorClient(api_config.mongodb_url)
        database = client[api_config.mongodb_database]

        # Test connection
        await database.command("ping")
        logger.info("Database connection established")

        db_service = APIDatabaseService(database)
        await db_service.ensure_indexes()

    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("Shutting down Book Catalogue API")
    if db_service:
        client.close()


# Create FastAPI application
app = FastAPI(
    title=api_config.api_title,
    description=f"""
    {api_config.api_description}

    ## Features

    * **Books**: Browse the catalogue and look up single books
    * **Favorites**: Add, remove and list the signed-in user's favorite books

    ## Authentication

    Favorites and user endpoints require a bearer token:

    ```
    Authorization: Bearer your_token_here
    ```
    """,
    version=api_config.api_version,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            message=str(exc.detail),
            status_code=exc.status_code
        ).model_dump(),
        headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Report malformed requests as 400 rather than 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            message="Invalid request",
            detail=jsonable_encoder(exc.errors()),
            status_code=status.HTTP_400_BAD_REQUEST
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            message="Internal Server Error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


def get_favorites_controller() -> FavoritesController:
    """Build a controller over the live database service."""
    if not db_service:
        logger.error("Database service not available")
        raise InternalError()
    return FavoritesController(db_service)


def to_http_exception(error: FavoritesError) -> HTTPException:
    """Convert a controller error into its HTTP response."""
    return HTTPException(status_code=error.status_code, detail=error.message)


# Health check endpoint (no authentication required)
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    try:
        db_status = "unavailable"
        if db_service:
            health_info = await db_service.health_check()
            db_status = health_info.get("status", "unknown")

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.utcnow(),
            version=api_config.api_version,
            database_status=db_status
        )
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            timestamp=datetime.utcnow(),
            version=api_config.api_version,
            database_status="unhealthy"
        )


# Books endpoints
@app.get("/books", response_model=BookListResponse, tags=["Books"])
async def get_books(page: int = 1, per_page: int = 20):
    """
    Get books ordered by title, with pagination.

    - **page**: Page number (starts from 1)
    - **per_page**: Items per page (1-100)
    """
    try:
        query_params = BookQueryParams(page=page, per_page=per_page)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    try:
        if not db_service:
            raise InternalError()
        result = await db_service.get_books(query_params)
        return JSONResponse(content=result.model_dump())

    except Exception as e:
        logger.error("Failed to get books", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )


@app.get("/books/{book_id}", response_model=BookResponse, tags=["Books"])
async def get_book(book_id: str):
    """
    Get a single book by ID.

    - **book_id**: MongoDB ObjectId of the book
    """
    try:
        if not db_service:
            raise InternalError()
        book = await db_service.get_book_by_id(book_id)

    except Exception as e:
        logger.error("Failed to get book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )

    if not book:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    return JSONResponse(content=book.model_dump())


# Favorites endpoints
@app.post(
    "/favorites",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Favorites"]
)
async def add_favorite(
    payload: Optional[FavoriteCreate] = Body(None),
    user_id: str = Depends(get_current_user_id)
):
    """
    Add a book to the signed-in user's favorites.

    - **bookId**: Book to add (request body)
    """
    book_id = payload.book_id if payload else None
    try:
        result = await get_favorites_controller().add(user_id, book_id)
    except FavoritesError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to add favorite", user_id=user_id, book_id=book_id, error=str(e))
        raise to_http_exception(InternalError())

    return JSONResponse(status_code=status.HTTP_201_CREATED, content=result.model_dump())


@app.delete(
    "/favorites",
    response_model=FavoriteDeleteResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Favorites"]
)
async def delete_favorite(
    book_id: Optional[str] = Query(None, alias="bookId"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Remove a book from the signed-in user's favorites.

    - **bookId**: Book to remove (query parameter)
    """
    try:
        result = await get_favorites_controller().remove(user_id, book_id)
    except FavoritesError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to remove favorite", user_id=user_id, book_id=book_id, error=str(e))
        raise to_http_exception(InternalError())

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=result.model_dump(by_alias=True)
    )


@app.get("/favorites", response_model=FavoriteListResponse, tags=["Favorites"])
async def get_user_favorites(user_id: str = Depends(get_current_user_id)):
    """List the signed-in user's favorite books."""
    try:
        result = await get_favorites_controller().list(user_id)
    except FavoritesError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list favorites", user_id=user_id, error=str(e))
        raise to_http_exception(InternalError())

    return JSONResponse(content=result.model_dump())


# User endpoints
@app.get("/users/authenticate", response_model=AuthenticatedResponse, tags=["Users"])
async def authenticate_me(user_id: str = Depends(get_current_user_id)):
    """Return the profile of the user the bearer token belongs to."""
    try:
        if not db_service:
            raise InternalError()
        user_doc = await db_service.get_user_by_id(user_id)

    except Exception as e:
        logger.error("Failed to load user", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )

    user = UserResponse(
        id=user_id,
        username=user_doc.get("username") if user_doc else None,
        email=user_doc.get("email") if user_doc else None
    )
    return JSONResponse(content=AuthenticatedResponse(message="Authenticated", user=user).model_dump())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=True,
        log_level="info"
    )
