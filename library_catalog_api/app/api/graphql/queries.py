"""Root ``Query`` type: read-only views of the catalog."""

from typing import List, Optional

import strawberry
from strawberry.types import Info

from library_catalog_api.app.services.author_service import AuthorService
from library_catalog_api.app.services.book_service import BookService

from .types import AuthorDetails, Book, User


@strawberry.type
class Query:
    @strawberry.field
    async def book_count(self) -> int:
        return await BookService.count_books()

    @strawberry.field
    async def author_count(self) -> int:
        return await AuthorService.count_authors()

    @strawberry.field(description="Books, optionally filtered by exact author name and/or genre.")
    async def all_books(self, author: Optional[str] = None, genre: Optional[str] = None) -> List[Book]:
        books = await BookService.list_books(author=author, genre=genre)
        return [Book.from_read(book) for book in books]

    @strawberry.field
    async def all_authors(self) -> List[AuthorDetails]:
        authors = await AuthorService.list_authors()
        return [AuthorDetails.from_read(author) for author in authors]

    @strawberry.field(description="The authenticated caller, or null for anonymous requests.")
    def me(self, info: Info) -> Optional[User]:
        current_user = info.context.current_user
        if current_user is None:
            return None
        return User.from_read(current_user)
