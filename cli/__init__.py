"""CLI package for the bookshelf backend"""
from .main import cli

__all__ = ['cli']
