"""Local Library - Controllers Package

One controller per entity. Controllers take the document store at
construction time and return an outcome (Render, Redirect or Placeholder)
that the web layer turns into a response:
- Author controller (author.py)
- Book controller and catalog home page (book.py)
- Genre controller (genre.py)
- BookInstance controller (bookinstance.py)
"""
from .base import NotFoundError, Outcome, Placeholder, Redirect, Render
from .author import AuthorController
from .book import BookController
from .genre import GenreController
from .bookinstance import BookInstanceController

__all__ = [
    "AuthorController",
    "BookController",
    "BookInstanceController",
    "GenreController",
    "NotFoundError",
    "Outcome",
    "Placeholder",
    "Redirect",
    "Render",
]
