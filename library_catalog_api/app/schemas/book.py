"""
Pydantic models for books.

Books are created only through the ``addBook`` mutation and are never
updated or deleted.  The author is referenced by name on input and
resolved to an author record by ``BookService``.
"""

from typing import List

from pydantic import BaseModel, Field

from .author import AuthorRead


class BookCreate(BaseModel):
    """Schema for adding a book to the catalog."""

    title: str = Field(..., min_length=1, example="Dune")
    author: str = Field(..., description="Name of the author; created if unknown", example="Frank Herbert")
    published: int = Field(..., example=1965)
    genres: List[str] = Field(default_factory=list, example=["scifi"])


class BookRead(BaseModel):
    """A book joined with its author's details."""

    id: int
    title: str
    published: int
    genres: List[str] = Field(default_factory=list)
    author: AuthorRead
