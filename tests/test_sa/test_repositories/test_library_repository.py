# tests/test_sa/test_repositories/test_library_repository.py

import pytest
from core.exceptions import ConflictError
from core.sa.repositories.library import LibraryRepository
from core.sa.models import Book, LibraryEntry

@pytest.fixture
def library_repo(db_session):
    """Fixture to create a LibraryRepository instance."""
    return LibraryRepository(db_session)

@pytest.fixture
def second_book(db_session):
    book = Book(id="cached2", title="Second Book", authors=["B"], categories=["C"], images={}, page_count=50)
    db_session.add(book)
    db_session.commit()
    return book

def test_get_entry(library_repo, sample_entry):
    entry = library_repo.get_entry(sample_entry.user_id, sample_entry.book_id)
    assert entry is not None
    assert entry.status == "POSSESSION"
    assert entry.book.title == "The Cached Book"

def test_get_entry_missing(library_repo, sample_user):
    assert library_repo.get_entry(sample_user.id, "cached1") is None

def test_create_entry(library_repo, sample_user, sample_book):
    entry = library_repo.create_entry(sample_user.id, sample_book.id, "WISHLIST")
    assert entry.current_page == 0
    assert library_repo.count_for_pair(sample_user.id, sample_book.id) == 1

def test_create_duplicate_entry(library_repo, sample_entry, db_session):
    """Test that a second insert for the pair is a conflict and leaves one row."""
    db_session.expunge(sample_entry)
    with pytest.raises(ConflictError):
        library_repo.create_entry(sample_entry.user_id, sample_entry.book_id, "WISHLIST")
    assert library_repo.count_for_pair(sample_entry.user_id, sample_entry.book_id) == 1

def test_list_for_user(library_repo, sample_user, sample_book, second_book):
    library_repo.create_entry(sample_user.id, sample_book.id, "WISHLIST")
    library_repo.create_entry(sample_user.id, second_book.id, "POSSESSION", 10)

    entries = library_repo.list_for_user(sample_user.id)
    assert {entry.book_id for entry in entries} == {"cached1", "cached2"}
    assert all(entry.book is not None for entry in entries)

def test_list_for_user_excludes_other_books(library_repo, sample_entry, second_book):
    """Test that mirrored books without an entry are not listed."""
    entries = library_repo.list_for_user(sample_entry.user_id)
    assert [entry.book_id for entry in entries] == ["cached1"]

def test_list_for_unknown_user(library_repo, sample_entry):
    assert library_repo.list_for_user(999) == []

def test_update_entry_partial(library_repo, sample_entry):
    updated = library_repo.update_entry(sample_entry, current_page=40)
    assert updated.current_page == 40
    assert updated.status == "POSSESSION"

def test_delete_entry(library_repo, sample_entry, db_session):
    assert library_repo.delete_entry(sample_entry.user_id, sample_entry.book_id) is True
    assert db_session.query(LibraryEntry).count() == 0

def test_delete_nonexistent_entry(library_repo, sample_user):
    assert library_repo.delete_entry(sample_user.id, "cached1") is False
