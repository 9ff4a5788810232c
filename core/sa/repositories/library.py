# core/sa/repositories/library.py
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError

from core.exceptions import ConflictError
from core.sa.models import LibraryEntry


class LibraryRepository:
    """Repository for managing per-user LibraryEntry rows."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.
        
        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_entry(self, user_id: int, book_id: str) -> Optional[LibraryEntry]:
        """Get the entry for a (user, book) pair.
        
        Args:
            user_id: The ID of the user
            book_id: The catalog ID of the book
            
        Returns:
            The LibraryEntry with its book loaded if found, None otherwise
        """
        return (
            self.session.query(LibraryEntry)
            .options(joinedload(LibraryEntry.book))
            .filter(
                LibraryEntry.user_id == user_id,
                LibraryEntry.book_id == book_id
            )
            .one_or_none()
        )

    def list_for_user(self, user_id: int) -> List[LibraryEntry]:
        """Get every entry a user has, most recently touched first.
        
        Args:
            user_id: The ID of the user
            
        Returns:
            List of LibraryEntry objects with their book loaded
        """
        return (
            self.session.query(LibraryEntry)
            .join(LibraryEntry.book)
            .options(joinedload(LibraryEntry.book))
            .filter(LibraryEntry.user_id == user_id)
            .order_by(desc(LibraryEntry.updated_at), LibraryEntry.book_id)
            .all()
        )

    def count_for_pair(self, user_id: int, book_id: str) -> int:
        return (
            self.session.query(LibraryEntry)
            .filter(
                LibraryEntry.user_id == user_id,
                LibraryEntry.book_id == book_id
            )
            .count()
        )

    def create_entry(self, user_id: int, book_id: str, status: str, current_page: int = 0) -> LibraryEntry:
        """Create a new library entry.
        
        Args:
            user_id: The ID of the user
            book_id: The catalog ID of an already mirrored book
            status: Library status
            current_page: Reading progress
            
        Returns:
            The created LibraryEntry object
            
        Raises:
            ConflictError: If the pair already has an entry
        """
        entry = LibraryEntry(
            user_id=user_id,
            book_id=book_id,
            status=status,
            current_page=current_page
        )
        self.session.add(entry)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("This book is already in your library")
        return entry

    def update_entry(
        self,
        entry: LibraryEntry,
        status: Optional[str] = None,
        current_page: Optional[int] = None
    ) -> LibraryEntry:
        """Write the supplied fields of an existing entry."""
        if status is not None:
            entry.status = status
        if current_page is not None:
            entry.current_page = current_page

        self.session.commit()
        return entry

    def delete_entry(self, user_id: int, book_id: str) -> bool:
        """Delete a library entry.
        
        Returns:
            True if the entry was deleted, False if not found
        """
        result = (
            self.session.query(LibraryEntry)
            .filter(
                LibraryEntry.user_id == user_id,
                LibraryEntry.book_id == book_id
            )
            .delete()
        )
        self.session.commit()
        return result > 0
