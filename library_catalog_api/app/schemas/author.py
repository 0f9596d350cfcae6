"""
Pydantic models for authors.

An author is identified by a unique name and may carry a birth year.
``bookCount`` is never stored; ``AuthorRead`` receives it from the
service layer, which counts the author's books on every read.
"""

from typing import Optional

from pydantic import BaseModel, Field

AUTHOR_NAME_MIN_LENGTH = 5


class AuthorCreate(BaseModel):
    """Schema for creating an author."""

    name: str = Field(..., min_length=AUTHOR_NAME_MIN_LENGTH, example="Frank Herbert")
    born: Optional[int] = Field(None, example=1920)


class AuthorRead(BaseModel):
    """Author details joined with the number of books referencing the author."""

    id: int
    name: str
    born: Optional[int] = None
    book_count: int = 0

    model_config = {
        "from_attributes": True,
    }
