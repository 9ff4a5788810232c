# core/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "change-me"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",        # Local Vite dev server
    "http://localhost:4173",        # Local Vite preview
    "http://127.0.0.1:5173",
    "http://localhost",
]


def _split_origins(value: Optional[str]) -> List[str]:
    if not value:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    """Startup configuration handed to every component that needs it."""

    database_url: str = "sqlite:///bookshelf.db"
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 90
    password_hash_rounds: int = 10
    google_books_api_key: Optional[str] = None
    google_books_base_url: str = "https://www.googleapis.com/books/v1"
    catalog_timeout: float = 10.0
    login_cooldown_seconds: int = 30
    profile_pictures_dir: str = "profile_pictures"
    max_profile_picture_bytes: int = 5 * 1024 * 1024
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment (and a .env file if present)."""
        load_dotenv()
        settings = cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///bookshelf.db"),
            jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            token_ttl_days=int(os.getenv("TOKEN_TTL_DAYS", "90")),
            password_hash_rounds=int(os.getenv("SALT_ROUNDS", "10")),
            google_books_api_key=os.getenv("API_KEY") or None,
            google_books_base_url=os.getenv("GOOGLE_BOOKS_BASE_URL", "https://www.googleapis.com/books/v1"),
            catalog_timeout=float(os.getenv("GOOGLE_BOOKS_TIMEOUT", "10")),
            login_cooldown_seconds=int(os.getenv("LOGIN_COOLDOWN_SECONDS", "30")),
            profile_pictures_dir=os.getenv("PROFILE_PICTURES_DIR", "profile_pictures"),
            max_profile_picture_bytes=int(os.getenv("MAX_PROFILE_PICTURE_BYTES", str(5 * 1024 * 1024))),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
        )
        if settings.jwt_secret == DEFAULT_JWT_SECRET:
            logger.warning("JWT_SECRET is not set, using the insecure default secret")
        return settings


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a single stream handler to the root logger."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
