# tests/conftest.py
import os
import sys
import pytest
from pathlib import Path
from unittest.mock import Mock
from sqlalchemy.sql import text
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from api.dependencies import get_catalog_client
from api.main import create_app
from core.auth.passwords import hash_password
from core.auth.tokens import TokenService
from core.catalog.google_books import GoogleBooksClient
from core.config import Settings
from core.sa.database import Database
from core.sa.models import Book, User, LibraryEntry

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
TEST_PASSWORD = "correct horse battery"


def _make_volume(volume_id="bookA", title="Book A", page_count=200, **volume_info):
    """Build a catalog volume resource shaped like the Google Books API."""
    info = {
        "title": title,
        "authors": ["Jane Author"],
        "publisher": "Test Press",
        "publishedDate": "2021-05-04",
        "description": f"Description of {title}",
        "industryIdentifiers": [
            {"type": "ISBN_10", "identifier": "1234567890"},
            {"type": "ISBN_13", "identifier": "9781234567897"},
        ],
        "pageCount": page_count,
        "categories": ["Fiction"],
        "language": "en",
        "imageLinks": {
            "smallThumbnail": f"http://books.example.com/{volume_id}/small.jpg",
            "thumbnail": f"http://books.example.com/{volume_id}/thumb.jpg",
        },
    }
    info.update(volume_info)
    return {"kind": "books#volume", "id": volume_id, "volumeInfo": info}


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_bookshelf.db")


@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_all()
    db.init_db()

    yield db

    db.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass


@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def cleanup_db(database):
    """Clean up database tables before each test"""
    with database.engine.begin() as connection:
        connection.execute(text("DELETE FROM users_books"))
        connection.execute(text("DELETE FROM books"))
        connection.execute(text("DELETE FROM users"))
    yield


@pytest.fixture
def settings(tmp_path, test_db_path):
    return Settings(
        database_url=f"sqlite:///{test_db_path}",
        jwt_secret=TEST_SECRET,
        password_hash_rounds=4,
        login_cooldown_seconds=30,
        profile_pictures_dir=str(tmp_path / "profile_pictures"),
    )


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def catalog_volumes():
    """Volumes known to the mocked catalog, keyed by id."""
    return {
        "bookA": _make_volume("bookA", "Book A", page_count=200),
        "bookB": _make_volume("bookB", "Another Book", page_count=0),
    }


@pytest.fixture
def mock_catalog(catalog_volumes):
    catalog = Mock(spec=GoogleBooksClient)
    catalog.get_volume.side_effect = lambda volume_id: catalog_volumes.get(volume_id)
    catalog.search.return_value = list(catalog_volumes.values())
    return catalog


@pytest.fixture
def sample_user(db_session):
    """Create a sample user for testing."""
    user = User(
        email="a@x.com",
        username="alice",
        password=hash_password(TEST_PASSWORD, rounds=4),
        nickname="Alice",
        bio="Reads a lot",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def sample_book(db_session):
    """Create a sample mirrored book for testing."""
    book = Book(
        id="cached1",
        title="The Cached Book",
        authors=["Test Author"],
        publisher="Test Publisher",
        published_date="2020",
        description="Test book description",
        isbn13="9780000000001",
        page_count=300,
        categories=["Fiction"],
        language="en",
        images={"thumbnail": "http://example.com/cover.jpg"},
    )
    db_session.add(book)
    db_session.commit()
    return book


@pytest.fixture
def sample_entry(db_session, sample_user, sample_book):
    """Put the sample book in the sample user's library."""
    entry = LibraryEntry(
        user_id=sample_user.id,
        book_id=sample_book.id,
        status="POSSESSION",
        current_page=12
    )
    db_session.add(entry)
    db_session.commit()
    return entry


@pytest.fixture
def make_volume():
    """Factory for catalog volume resources."""
    return _make_volume


@pytest.fixture
def test_password():
    """Plain-text password of sample_user."""
    return TEST_PASSWORD


@pytest.fixture
def app(settings, database, mock_catalog):
    """Application wired to the test database and the mocked catalog."""
    application = create_app(settings, database=database)
    application.dependency_overrides[get_catalog_client] = lambda: mock_catalog
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(sample_user, token_service):
    token = token_service.issue(TokenService.user_claims(sample_user))
    return {"Authorization": f"Bearer {token}"}
