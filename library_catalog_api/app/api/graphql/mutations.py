"""
Root ``Mutation`` type.

Service exceptions caused by client input are reported as
``BAD_USER_INPUT`` errors; ``addBook`` and ``editAuthor`` additionally
require an authenticated caller and report ``UNAUTHENTICATED``
otherwise.  Any other exception propagates unchanged.
"""

import logging
from typing import List, Optional

import strawberry
from strawberry.types import Info

from library_catalog_api.app.core.errors import UserInputError, bad_user_input_error, unauthenticated_error
from library_catalog_api.app.core.pubsub import BOOK_ADDED
from library_catalog_api.app.services.author_service import AuthorService
from library_catalog_api.app.services.book_service import BookService
from library_catalog_api.app.services.user_service import InvalidCredentials, UserService

from .types import AuthorDetails, Book, Token, User

logger = logging.getLogger(__name__)


def require_user(info: Info) -> None:
    if info.context.current_user is None:
        raise unauthenticated_error()


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_book(
        self,
        info: Info,
        title: str,
        author: str,
        published: int,
        genres: List[str],
    ) -> Optional[Book]:
        require_user(info)
        try:
            book = await BookService.add_book(title=title, author=author, published=published, genres=genres)
        except UserInputError as exc:
            raise bad_user_input_error(str(exc), exc.invalid_args)
        await info.context.event_bus.publish(BOOK_ADDED, book)
        return Book.from_read(book)

    @strawberry.mutation
    async def edit_author(self, info: Info, name: str, set_born_to: int) -> Optional[AuthorDetails]:
        require_user(info)
        author = await AuthorService.set_born(name, set_born_to)
        if author is None:
            logger.debug("editAuthor: no author named %s", name)
            return None
        return AuthorDetails.from_read(author)

    @strawberry.mutation
    async def create_user(self, username: str, favorite_genre: Optional[str] = None) -> Optional[User]:
        try:
            user = await UserService.create_user(username, favorite_genre)
        except UserInputError as exc:
            raise bad_user_input_error(str(exc), exc.invalid_args)
        return User.from_read(user)

    @strawberry.mutation
    async def login(self, username: str, password: str) -> Optional[Token]:
        try:
            token = await UserService.login(username, password)
        except InvalidCredentials as exc:
            raise bad_user_input_error(str(exc))
        return Token.from_read(token)
