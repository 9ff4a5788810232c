# cli/main.py
import click
from .commands.db import db
from .commands.book import book
from .commands.serve import serve


@click.group()
def cli():
    """Bookshelf backend CLI"""
    pass


cli.add_command(db)
cli.add_command(book)
cli.add_command(serve)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
