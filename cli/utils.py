# cli/utils.py
import click

from core.catalog.google_books import GoogleBooksClient
from core.config import Settings
from core.sa.database import Database
from core.sa.models import Book


def load_settings() -> Settings:
    return Settings.from_env()


def open_database(settings: Settings) -> Database:
    database = Database(settings.database_url)
    database.init_db()
    return database


def build_catalog_client(settings: Settings) -> GoogleBooksClient:
    return GoogleBooksClient(
        api_key=settings.google_books_api_key,
        base_url=settings.google_books_base_url,
        timeout=settings.catalog_timeout,
    )


def echo_book(book: Book, verbose: bool = False) -> None:
    """Print one book as a single line, plus details when verbose"""
    click.echo(click.style(book.id, fg='cyan') + "  " +
               click.style(book.title, fg='green') + "  " +
               click.style(", ".join(book.authors or []), fg='blue'))
    if verbose:
        click.echo(f"  Publisher: {book.publisher}")
        click.echo(f"  Published: {book.published_date or 'unknown'}")
        click.echo(f"  Pages: {book.page_count or 'unknown'}")
        click.echo(f"  ISBN-13: {book.isbn13}")
        click.echo(f"  Categories: {', '.join(book.categories or [])}")
