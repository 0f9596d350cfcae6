"""
Business logic for authors.

Authors are stored in the ``authors`` table.  The number of books
written by an author is not stored anywhere: every read counts the
rows of ``books`` that reference the author, so the figure can never
go stale.
"""

from __future__ import annotations

import logging
import sqlite3
from collections import Counter
from typing import Dict, List, Optional

from pydantic import ValidationError

from library_catalog_api.app.core.db import get_connection
from library_catalog_api.app.core.errors import DuplicateRecord, ValidationFailed
from library_catalog_api.app.schemas.author import AUTHOR_NAME_MIN_LENGTH, AuthorCreate, AuthorRead

logger = logging.getLogger(__name__)


def count_books_by_author(conn: sqlite3.Connection) -> Dict[int, int]:
    """Return a mapping of author id to the number of books referencing it."""
    rows = conn.execute("SELECT author_id FROM books").fetchall()
    return Counter(row["author_id"] for row in rows)


def row_to_author_read(row: sqlite3.Row, book_count: int) -> AuthorRead:
    return AuthorRead(id=row["id"], name=row["name"], born=row["born"], book_count=book_count)


class AuthorService:
    """Service class for reading and editing authors."""

    @classmethod
    async def count_authors(cls) -> int:
        conn = get_connection()
        try:
            row = conn.execute("SELECT COUNT(*) AS count FROM authors").fetchone()
            return row["count"]
        finally:
            conn.close()

    @classmethod
    async def list_authors(cls) -> List[AuthorRead]:
        """Return every author joined with a freshly computed book count."""
        conn = get_connection()
        try:
            rows = conn.execute("SELECT id, name, born FROM authors ORDER BY id").fetchall()
            counts = count_books_by_author(conn)
            return [row_to_author_read(row, counts.get(row["id"], 0)) for row in rows]
        finally:
            conn.close()

    @classmethod
    def insert_author(cls, conn: sqlite3.Connection, name: str) -> int:
        """Validate and insert a new author on ``conn`` without committing.

        Raises ``ValidationFailed`` if the name is too short.  If another
        request stored the same name first, the id of that author is
        returned instead.
        """
        try:
            data = AuthorCreate(name=name)
        except ValidationError:
            raise ValidationFailed(
                f"Author name should be {AUTHOR_NAME_MIN_LENGTH} or more in length",
                invalid_args=name,
            )
        try:
            cursor = conn.execute(
                "INSERT INTO authors (name, born) VALUES (?, ?)",
                (data.name, data.born),
            )
        except sqlite3.IntegrityError:
            existing = conn.execute(
                "SELECT id, name, born FROM authors WHERE name = ?",
                (data.name,),
            ).fetchone()
            if existing is None:
                raise DuplicateRecord("Author already exists", invalid_args=name)
            logger.info("Author %s was created concurrently; reusing id %s", data.name, existing["id"])
            return existing["id"]
        logger.info("Created author %s (%s)", cursor.lastrowid, data.name)
        return cursor.lastrowid

    @classmethod
    async def set_born(cls, name: str, born: int) -> Optional[AuthorRead]:
        """Set the birth year of the author called ``name``.

        Returns the updated author with its book count, or ``None``
        (without touching the database) if no author has that name.
        """
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE authors SET born = ? WHERE name = ?",
                (born, name),
            )
            if cursor.rowcount == 0:
                return None
            conn.commit()
            logger.info("Set birth year of %s to %s", name, born)
            row = conn.execute(
                "SELECT id, name, born FROM authors WHERE name = ?",
                (name,),
            ).fetchone()
            return cls._with_book_count(conn, row)
        finally:
            conn.close()

    @staticmethod
    def _with_book_count(conn: sqlite3.Connection, row: sqlite3.Row) -> AuthorRead:
        count = conn.execute(
            "SELECT COUNT(*) AS count FROM books WHERE author_id = ?",
            (row["id"],),
        ).fetchone()["count"]
        return row_to_author_read(row, count)
