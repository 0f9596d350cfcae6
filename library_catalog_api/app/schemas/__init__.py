"""
Pydantic schemas for the library catalog.

Each domain (authors, books, users) has its own module defining
models for creating records and for reading them back.
"""

from .author import AuthorCreate, AuthorRead  # noqa: F401
from .book import BookCreate, BookRead  # noqa: F401
from .user import TokenRead, UserCreate, UserRead  # noqa: F401
