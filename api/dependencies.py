# api/dependencies.py
from datetime import timedelta
from typing import Iterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from core.auth.tokens import TokenService
from core.catalog.google_books import GoogleBooksClient
from core.config import Settings
from core.exceptions import UnauthorizedError
from core.sa.models import User
from core.services.auth_service import AuthService
from core.services.catalog_service import BookCatalogMirror
from core.services.library_service import LibraryLedger
from core.services.profile_pictures import ProfilePictureStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """Get a database session.
    
    The session is closed when the request is complete.
    
    Yields:
        Session: A SQLAlchemy session
    """
    session = request.app.state.database.get_session()
    try:
        yield session
    finally:
        session.close()


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_catalog_client(request: Request) -> GoogleBooksClient:
    return request.app.state.catalog_client


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    return AuthService(
        db,
        tokens,
        login_cooldown=timedelta(seconds=settings.login_cooldown_seconds),
        hash_rounds=settings.password_hash_rounds,
    )


def get_catalog_mirror(
    db: Session = Depends(get_db),
    client: GoogleBooksClient = Depends(get_catalog_client)
) -> BookCatalogMirror:
    return BookCatalogMirror(db, client)


def get_library_ledger(
    db: Session = Depends(get_db),
    mirror: BookCatalogMirror = Depends(get_catalog_mirror)
) -> LibraryLedger:
    return LibraryLedger(db, mirror)


def get_profile_picture_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> ProfilePictureStore:
    return ProfilePictureStore(db, settings.profile_pictures_dir, settings.max_profile_picture_bytes)


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedError("Missing or invalid authorization header")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise UnauthorizedError("Missing or invalid authorization header")
    return parts[1].strip()


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    return auth_service.current_user(extract_bearer_token(authorization))
