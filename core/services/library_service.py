# core/services/library_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import BadRequestError, ConflictError, NotFoundError
from core.sa.models import Book, LibraryEntry, LibraryStatus
from core.sa.repositories.library import LibraryRepository
from .catalog_service import BookCatalogMirror

logger = logging.getLogger(__name__)

VALID_STATUSES = [status.value for status in LibraryStatus]


def _validate_status(status: Optional[str]) -> str:
    if isinstance(status, LibraryStatus):
        return status.value
    if status not in VALID_STATUSES:
        raise BadRequestError(f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}")
    return status


def _validate_page(current_page) -> int:
    # bool is an int subclass
    if isinstance(current_page, bool) or not isinstance(current_page, int) or current_page < 0:
        raise BadRequestError("Current page must be a non-negative integer")
    return current_page


def _check_page_bound(book: Book, current_page: int) -> None:
    # An unknown page count (0) leaves progress unbounded
    if book.page_count and current_page > book.page_count:
        raise BadRequestError("Current page cannot be greater than total page count")


class LibraryLedger:
    """Per-user reading state for mirrored books."""

    def __init__(self, session: Session, mirror: BookCatalogMirror):
        self.session = session
        self.mirror = mirror
        self.entries = LibraryRepository(session)

    def list(self, user_id: int) -> List[LibraryEntry]:
        return self.entries.list_for_user(user_id)

    def add(self, user_id: int, book_id: str, status: Optional[str], current_page: Optional[int] = None) -> LibraryEntry:
        """Put a book in the user's library, caching it from the catalog if needed.
        
        Raises:
            BadRequestError: On a missing/invalid status or page
            NotFoundError: If the book cannot be resolved anywhere
            ConflictError: If the book is already in the user's library
        """
        if not status:
            raise BadRequestError("Status is required")
        status = _validate_status(status)

        if current_page is None:
            current_page = 0
        elif status == LibraryStatus.WISHLIST.value:
            current_page = 0
        else:
            current_page = _validate_page(current_page)

        # The mirror row is committed before the entry so no entry can point at a missing book
        book = self.mirror.ensure_cached(book_id)

        if self.entries.get_entry(user_id, book_id) is not None:
            raise ConflictError("This book is already in your library")

        _check_page_bound(book, current_page)

        entry = self.entries.create_entry(user_id, book_id, status, current_page)
        logger.info(f"User {user_id} added book {book_id} as {status}")
        return entry

    def update(
        self,
        user_id: int,
        book_id: str,
        status: Optional[str] = None,
        current_page: Optional[int] = None
    ) -> LibraryEntry:
        """Change status and/or reading progress of an existing entry.
        
        Raises:
            BadRequestError: On invalid input or progress beyond the book's page count
            NotFoundError: If the book is not in the user's library
        """
        if status is None and current_page is None:
            raise BadRequestError("Status or current page is required")

        if status is not None:
            status = _validate_status(status)
            if status == LibraryStatus.WISHLIST.value and current_page is not None:
                current_page = 0

        if current_page is not None:
            current_page = _validate_page(current_page)

        entry = self.entries.get_entry(user_id, book_id)
        if entry is None:
            raise NotFoundError("Book not found in your library")

        if current_page is not None:
            _check_page_bound(entry.book, current_page)

        return self.entries.update_entry(entry, status=status, current_page=current_page)

    def remove(self, user_id: int, book_id: str) -> None:
        """Delete the entry. A second call for the same pair fails.
        
        Raises:
            NotFoundError: If there was nothing to delete
        """
        if not self.entries.delete_entry(user_id, book_id):
            raise NotFoundError("Book not found in your library")
        logger.info(f"User {user_id} removed book {book_id}")
