# core/services/catalog_service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.catalog.google_books import GoogleBooksClient
from core.catalog.transform import transform_google_book
from core.exceptions import BadRequestError, NotFoundError
from core.sa.models import Book
from core.sa.repositories.book import BookRepository

logger = logging.getLogger(__name__)


class BookCatalogMirror:
    """Local read-through cache of catalog volumes."""

    def __init__(self, session: Session, client: GoogleBooksClient):
        """
        Args:
            session: SQLAlchemy session
            client: Catalog client used on a cache miss
        """
        self.session = session
        self.client = client
        self.books = BookRepository(session)

    @staticmethod
    def _require_term(term: str) -> str:
        term = (term or '').strip()
        if not term:
            raise BadRequestError("Search term is required")
        return term

    def search(self, term: str) -> List[Book]:
        """Query the catalog live and write every result through to the mirror.
        
        Args:
            term: Free text search
            
        Returns:
            The refreshed Book rows, in catalog order
        """
        term = self._require_term(term)
        items = self.client.search(term)
        # Transform everything first so a malformed item writes nothing
        records = [transform_google_book(item) for item in items]
        books = [self.books.upsert(record) for record in records]
        logger.info(f"Catalog search '{term}' returned {len(books)} books")
        return books

    def search_cached(self, term: str) -> List[Book]:
        """Substring match on the titles already in the mirror; never calls the catalog."""
        return self.books.search_by_title(self._require_term(term))

    def get_by_id(self, book_id: str) -> Book:
        """Mirror-first read. A catalog hit is returned but not stored.
        
        Raises:
            NotFoundError: If neither the mirror nor the catalog has the book
        """
        book = self.books.get_by_id(book_id)
        if book is not None:
            return book

        data = self.client.get_volume(book_id)
        if data is None:
            raise NotFoundError("Book not found")
        return Book(**transform_google_book(data))

    def ensure_cached(self, book_id: str) -> Book:
        """Make sure the book has a mirror row and return it.
        
        Raises:
            NotFoundError: If the catalog does not know the book either
        """
        book = self.books.get_by_id(book_id)
        if book is not None:
            return book

        data = self.client.get_volume(book_id)
        if data is None:
            raise NotFoundError("Book not found in catalog")

        try:
            return self.books.insert(transform_google_book(data))
        except IntegrityError:
            # Another request cached it first
            book = self.books.get_by_id(book_id)
            if book is None:
                raise
            return book
