# core/sa/repositories/book.py
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime, UTC
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from ..models import Book, BOOK_FIELDS

logger = logging.getLogger(__name__)


class BookRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Get a mirrored book by its catalog ID"""
        return self.session.get(Book, book_id)

    def exists(self, book_id: str) -> bool:
        return self.session.query(Book.id).filter(Book.id == book_id).first() is not None

    def search_by_title(self, query: str, limit: int = 40) -> List[Book]:
        """Search mirrored books whose title contains the query.
        
        Args:
            query: Substring to look for, case-insensitive
            limit: Maximum number of results to return
            
        Returns:
            List of matching Book objects ordered by title
        """
        return (
            self.session.query(Book)
            .filter(Book.title.ilike(f"%{query}%"))
            .order_by(Book.title)
            .limit(limit)
            .all()
        )

    def count_books(self) -> int:
        return self.session.query(Book).count()

    def insert(self, book_data: Dict[str, Any]) -> Book:
        """Insert a new mirror row.
        
        Raises:
            IntegrityError: If a row with the same ID was inserted concurrently
        """
        book = Book(id=book_data['id'], last_synced_at=datetime.now(UTC))
        self._apply(book, book_data)
        self.session.add(book)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        logger.info(f"Book {book.id} added to database")
        return book

    def upsert(self, book_data: Dict[str, Any]) -> Book:
        """Insert the book or overwrite every field of the existing row.
        
        Args:
            book_data: Transformed catalog record, must contain 'id'
            
        Returns:
            The stored Book object
        """
        book = self.get_by_id(book_data['id'])
        if book is None:
            try:
                return self.insert(book_data)
            except IntegrityError:
                # Lost an insert race, fall through to overwrite the winner
                book = self.get_by_id(book_data['id'])

        self._apply(book, book_data)
        book.last_synced_at = datetime.now(UTC)
        self.session.commit()
        logger.info(f"Book {book.id} refreshed in database")
        return book

    @staticmethod
    def _apply(book: Book, book_data: Dict[str, Any]) -> None:
        for name in BOOK_FIELDS:
            setattr(book, name, book_data.get(name))
