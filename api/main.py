# api/main.py
import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.auth.tokens import TokenService
from core.catalog.google_books import GoogleBooksClient
from core.config import Settings, configure_logging
from core.exceptions import BookshelfError, TooManyRequestsError
from core.sa.database import Database
from api.routes import auth, books, library

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid {location}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookshelfError)
    async def bookshelf_error_handler(request: Request, exc: BookshelfError):
        headers = None
        if isinstance(exc, TooManyRequestsError) and exc.retry_after:
            headers = {"Retry-After": str(exc.retry_after)}
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error in {request.method} {request.url.path}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application from explicit startup configuration."""
    settings = settings or Settings.from_env()
    configure_logging()

    database = database or Database(settings.database_url)
    database.init_db()

    app = FastAPI(title="Bookshelf API")
    app.state.settings = settings
    app.state.database = database
    app.state.token_service = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )
    app.state.catalog_client = GoogleBooksClient(
        api_key=settings.google_books_api_key,
        base_url=settings.google_books_base_url,
        timeout=settings.catalog_timeout,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        return {"message": "Bookshelf API is running"}

    app.include_router(auth.router)
    app.include_router(books.router)
    app.include_router(library.router)
    return app

