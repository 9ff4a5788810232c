# core/sa/models/__init__.py
from .base import Base, TimestampMixin, LastSyncedMixin, SafeDateTime
from .book import Book, BOOK_FIELDS, IMAGE_VARIANTS
from .user import User
from .library import LibraryEntry, LibraryStatus

__all__ = [
    'Base',
    'TimestampMixin',
    'LastSyncedMixin',
    'SafeDateTime',
    'Book',
    'BOOK_FIELDS',
    'IMAGE_VARIANTS',
    'User',
    'LibraryEntry',
    'LibraryStatus',
]
