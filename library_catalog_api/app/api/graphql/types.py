"""
GraphQL object types.

Each type is built from the corresponding pydantic read model returned
by the service layer.  Field names are converted to camelCase by
strawberry, so ``book_count`` is exposed as ``bookCount``.
"""

from typing import List, Optional

import strawberry

from library_catalog_api.app.schemas.author import AuthorRead
from library_catalog_api.app.schemas.book import BookRead
from library_catalog_api.app.schemas.user import TokenRead, UserRead


@strawberry.type
class AuthorDetails:
    """An author with the number of catalog books referencing them."""

    id: strawberry.ID
    name: str
    born: Optional[int]
    book_count: int

    @classmethod
    def from_read(cls, author: AuthorRead) -> "AuthorDetails":
        return cls(
            id=strawberry.ID(str(author.id)),
            name=author.name,
            born=author.born,
            book_count=author.book_count,
        )


@strawberry.type
class Book:
    id: strawberry.ID
    title: str
    published: int
    author: AuthorDetails
    genres: List[str]

    @classmethod
    def from_read(cls, book: BookRead) -> "Book":
        return cls(
            id=strawberry.ID(str(book.id)),
            title=book.title,
            published=book.published,
            author=AuthorDetails.from_read(book.author),
            genres=list(book.genres),
        )


@strawberry.type
class User:
    id: strawberry.ID
    username: str
    favorite_genre: Optional[str]

    @classmethod
    def from_read(cls, user: UserRead) -> "User":
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            favorite_genre=user.favorite_genre,
        )


@strawberry.type
class Token:
    """A signed bearer token; send it as ``Authorization: Bearer <value>``."""

    value: str

    @classmethod
    def from_read(cls, token: TokenRead) -> "Token":
        return cls(value=token.value)
