# cli/commands/book.py
import click

from core.exceptions import BookshelfError
from core.services.catalog_service import BookCatalogMirror
from cli.utils import build_catalog_client, echo_book, load_settings, open_database


@click.group()
def book():
    """Book catalog commands"""
    pass


@book.command()
@click.argument('term')
@click.option('--cached/--live', default=False, help='Search the local mirror instead of the catalog')
@click.option('--verbose', '-v', is_flag=True, help='Show details for every book')
def search(term: str, cached: bool, verbose: bool):
    """Search books by title or free text

    Example:
        bookshelf book search "project hail mary"
        bookshelf book search hail --cached
    """
    settings = load_settings()
    database = open_database(settings)
    try:
        with database.get_db() as session:
            mirror = BookCatalogMirror(session, build_catalog_client(settings))
            books = mirror.search_cached(term) if cached else mirror.search(term)
            if not books:
                click.echo("No books found")
                return
            for found in books:
                echo_book(found, verbose)
            click.echo(click.style(f"\n{len(books)} books", fg='blue'))
    except BookshelfError as e:
        raise click.ClickException(e.message)
    finally:
        database.dispose()


@book.command()
@click.argument('book_id')
def cache(book_id: str):
    """Cache a catalog book in the local mirror

    Example:
        bookshelf book cache zyTCAlFPjgYC
    """
    settings = load_settings()
    database = open_database(settings)
    try:
        with database.get_db() as session:
            mirror = BookCatalogMirror(session, build_catalog_client(settings))
            cached_book = mirror.ensure_cached(book_id)
            click.echo("Book cached:")
            echo_book(cached_book, verbose=True)
    except BookshelfError as e:
        raise click.ClickException(e.message)
    finally:
        database.dispose()
