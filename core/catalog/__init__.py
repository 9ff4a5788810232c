from .google_books import GoogleBooksClient
from .transform import transform_google_book

__all__ = ['GoogleBooksClient', 'transform_google_book']
