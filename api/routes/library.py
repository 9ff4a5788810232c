# api/routes/library.py

from fastapi import APIRouter, Depends, status

from core.sa.models import LibraryEntry, User
from core.services.library_service import LibraryLedger
from api.dependencies import get_current_user, get_library_ledger
from api.schemas.library import (
    LibraryAddRequest, LibraryBook, LibraryEntryResponse, LibraryList,
    LibraryRemoveResponse, LibraryUpdateRequest
)

router = APIRouter(prefix="/library", tags=["library"])


def _library_book(entry: LibraryEntry) -> LibraryBook:
    return LibraryBook(
        **entry.book.to_dict(),
        status=entry.status,
        current_page=entry.current_page,
    )


@router.get("", response_model=LibraryList)
def get_library(
    user: User = Depends(get_current_user),
    ledger: LibraryLedger = Depends(get_library_ledger)
):
    """
    Get the caller's library.
    
    Returns:
        LibraryList with every book the caller has an entry for, plus its status and progress
    """
    return LibraryList(books=[_library_book(entry) for entry in ledger.list(user.id)])


@router.post("/{book_id}", response_model=LibraryEntryResponse, status_code=status.HTTP_201_CREATED)
def add_to_library(
    book_id: str,
    payload: LibraryAddRequest,
    user: User = Depends(get_current_user),
    ledger: LibraryLedger = Depends(get_library_ledger)
):
    """Add a book to the caller's library, caching it from the catalog on first reference."""
    entry = ledger.add(user.id, book_id, payload.status, payload.current_page)
    return LibraryEntryResponse(
        message="Book added to your library",
        bookId=entry.book_id,
        status=entry.status,
        current_page=entry.current_page,
    )


@router.put("/{book_id}", response_model=LibraryEntryResponse)
def update_library_entry(
    book_id: str,
    payload: LibraryUpdateRequest,
    user: User = Depends(get_current_user),
    ledger: LibraryLedger = Depends(get_library_ledger)
):
    entry = ledger.update(user.id, book_id, status=payload.status, current_page=payload.current_page)
    return LibraryEntryResponse(
        message="Book updated in your library",
        bookId=entry.book_id,
        status=entry.status,
        current_page=entry.current_page,
    )


@router.delete("/{book_id}", response_model=LibraryRemoveResponse)
def remove_from_library(
    book_id: str,
    user: User = Depends(get_current_user),
    ledger: LibraryLedger = Depends(get_library_ledger)
):
    ledger.remove(user.id, book_id)
    return LibraryRemoveResponse(message="Book removed from your library", bookId=book_id)
