# cli/commands/db.py
import click

from cli.utils import load_settings, open_database


@click.group()
def db():
    """Database commands"""
    pass


@db.command()
def init():
    """Create all tables

    Example:
        bookshelf db init
    """
    settings = load_settings()
    database = open_database(settings)
    database.dispose()
    click.echo(click.style("Database initialized", fg='green'))
