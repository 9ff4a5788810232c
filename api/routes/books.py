# api/routes/books.py

from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.services.catalog_service import BookCatalogMirror
from api.dependencies import get_catalog_mirror
from api.schemas.book import BookList, BookResponse, BookSchema

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=BookList)
def search_books(
    q: Optional[str] = Query(None, description="Free text search sent to the catalog"),
    mirror: BookCatalogMirror = Depends(get_catalog_mirror)
):
    """
    Search the external catalog. Every result is written through to the local mirror.
    
    Args:
        q: Search term
        mirror: Book catalog mirror
    
    Returns:
        BookList with the refreshed books in catalog order
    """
    books = mirror.search(q)
    return BookList(books=[BookSchema.model_validate(book) for book in books])


@router.get("/cached", response_model=BookList)
def search_cached_books(
    q: Optional[str] = Query(None, description="Substring to match against cached titles"),
    mirror: BookCatalogMirror = Depends(get_catalog_mirror)
):
    """Search only the books already mirrored locally."""
    books = mirror.search_cached(q)
    return BookList(books=[BookSchema.model_validate(book) for book in books])


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: str, mirror: BookCatalogMirror = Depends(get_catalog_mirror)):
    """Get a book from the mirror, falling back to the catalog without caching."""
    return BookResponse(book=BookSchema.model_validate(mirror.get_by_id(book_id)))
