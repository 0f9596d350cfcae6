"""
Business logic for users.

Users are stored in the ``users`` table with a unique username and an
optional favourite genre.  No password is stored: ``login`` accepts
any existing username together with the shared ``LOGIN_PASSWORD`` and
issues a signed bearer token for it.
"""

import hmac
import logging
import sqlite3
from typing import Optional

from pydantic import ValidationError

from library_catalog_api.app.core.config import settings
from library_catalog_api.app.core.db import get_connection
from library_catalog_api.app.core.errors import DuplicateRecord, ValidationFailed
from library_catalog_api.app.core.security import create_access_token
from library_catalog_api.app.schemas.user import USERNAME_MIN_LENGTH, TokenRead, UserCreate, UserRead


class InvalidCredentials(Exception):
    """Raised by ``UserService.login`` for an unknown user or a wrong password."""


class UserService:
    """Service class for registering users and issuing login tokens."""

    @classmethod
    async def create_user(cls, username: str, favorite_genre: Optional[str] = None) -> UserRead:
        """Create a new user in the database.

        Raises ``ValidationFailed`` if the username is too short and
        ``DuplicateRecord`` if it is already taken.
        """
        logger = logging.getLogger(__name__)
        try:
            data = UserCreate(username=username, favorite_genre=favorite_genre)
        except ValidationError:
            raise ValidationFailed(
                "Creating user failed. Username should be at least "
                f"{USERNAME_MIN_LENGTH} characters in length",
                invalid_args=username,
            )
        conn = get_connection()
        try:
            try:
                cursor = conn.execute(
                    "INSERT INTO users (username, favorite_genre) VALUES (?, ?)",
                    (data.username, data.favorite_genre),
                )
            except sqlite3.IntegrityError:
                raise DuplicateRecord(
                    "Creating user failed. Username is already taken",
                    invalid_args=username,
                )
            conn.commit()
            logger.info("Registered user %s (%s)", cursor.lastrowid, data.username)
            return UserRead(id=cursor.lastrowid, username=data.username, favorite_genre=data.favorite_genre)
        finally:
            conn.close()

    @classmethod
    async def get_user(cls, user_id: int) -> Optional[UserRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, favorite_genre FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
            return cls._row_to_user_read(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_user_by_username(cls, username: str) -> Optional[UserRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, favorite_genre FROM users WHERE username = ?",
                (username,),
            ).fetchone()
            return cls._row_to_user_read(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def login(cls, username: str, password: str) -> TokenRead:
        """Issue a bearer token for ``username``.

        The password must equal ``settings.login_password``.  Raises
        ``InvalidCredentials`` otherwise, or if the user does not exist.
        """
        user = await cls.get_user_by_username(username)
        password_ok = hmac.compare_digest(password.encode("utf-8"), settings.login_password.encode("utf-8"))
        if user is None or not password_ok:
            logging.getLogger(__name__).info("Failed login for %s", username)
            raise InvalidCredentials("Wrong user credentials")
        token = create_access_token({"username": user.username, "id": user.id})
        return TokenRead(value=token)

    @staticmethod
    def _row_to_user_read(row: sqlite3.Row) -> UserRead:
        return UserRead(id=row["id"], username=row["username"], favorite_genre=row["favorite_genre"])
