# core/services/profile_pictures.py
import logging
import os
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import BadRequestError, NotFoundError
from core.sa.models import User
from core.sa.repositories.user import UserRepository

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/gif': '.gif',
    'image/webp': '.webp',
}

# Pillow format name for each accepted MIME type
PILLOW_FORMATS = {
    'image/jpeg': 'JPEG',
    'image/png': 'PNG',
    'image/gif': 'GIF',
    'image/webp': 'WEBP',
}

MEDIA_TYPES = {extension: mime for mime, extension in ALLOWED_MIME_TYPES.items()}


class ProfilePictureStore:
    """Stores at most one picture per user as <directory>/<user_id><ext>."""

    def __init__(self, session: Session, directory: str, max_bytes: int = 5 * 1024 * 1024):
        self.session = session
        self.users = UserRepository(session)
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    def _create_directory(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def _validate_image(self, content: bytes, content_type: str) -> None:
        if content_type not in ALLOWED_MIME_TYPES:
            raise BadRequestError("Only image files are allowed (JPEG, PNG, GIF, WebP)")
        if not content:
            raise BadRequestError("Uploaded file is empty")
        if len(content) > self.max_bytes:
            raise BadRequestError(f"Profile picture must be at most {self.max_bytes // (1024 * 1024)} MB")
        try:
            with Image.open(BytesIO(content)) as img:
                detected = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise BadRequestError("Uploaded file is not a valid image") from e
        if detected != PILLOW_FORMATS[content_type]:
            raise BadRequestError("Uploaded file does not match its content type")

    def path_for(self, user: User) -> Optional[Path]:
        if not user.profile_picture:
            return None
        path = self.directory / user.profile_picture
        return path if path.is_file() else None

    def media_type_for(self, path: Path) -> str:
        return MEDIA_TYPES.get(path.suffix.lower(), 'application/octet-stream')

    def save(self, user: User, content: bytes, content_type: str) -> User:
        """Validate and store a new picture, replacing any previous one.
        
        Raises:
            BadRequestError: If the upload is not an accepted image
        """
        self._validate_image(content, content_type)

        extension = ALLOWED_MIME_TYPES[content_type]
        filename = f"{user.id}{extension}"
        previous = user.profile_picture
        directory = self._create_directory()
        target = directory / filename

        # Stage the upload next to its final name; the previous picture stays
        # untouched until the row points at the new one
        fd, staged_name = tempfile.mkstemp(dir=directory, prefix=f".{user.id}-", suffix=extension)
        staged = Path(staged_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
            updated = self.users.set_profile_picture(user.id, filename)
        except SQLAlchemyError:
            staged.unlink(missing_ok=True)
            self.session.rollback()
            raise
        except OSError:
            staged.unlink(missing_ok=True)
            raise
        if updated is None:
            staged.unlink(missing_ok=True)
            raise NotFoundError("User not found")

        try:
            staged.replace(target)
        except OSError:
            staged.unlink(missing_ok=True)
            self.users.set_profile_picture(user.id, previous)
            raise

        if previous and previous != filename:
            (self.directory / previous).unlink(missing_ok=True)
        logger.info(f"Stored profile picture for user {user.id}")
        return updated

    def delete(self, user: User) -> User:
        """Remove the user's picture.
        
        Raises:
            NotFoundError: If the user has no picture
        """
        if not user.profile_picture:
            raise NotFoundError("No profile picture")
        filename = user.profile_picture
        updated = self.users.set_profile_picture(user.id, None)
        (self.directory / filename).unlink(missing_ok=True)
        return updated
