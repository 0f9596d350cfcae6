"""
Business logic for books.

Listing books loads the whole ``books`` and ``authors`` tables and
filters and joins them in memory.  Every returned book
carries its author's details and the author's current book count.

Adding a book runs on a single connection and commits once at the end,
so a rejected book never leaves a freshly created author behind.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections import Counter
from typing import Dict, List, Optional

from pydantic import ValidationError

from library_catalog_api.app.core.db import get_connection
from library_catalog_api.app.core.errors import DuplicateRecord, ValidationFailed
from library_catalog_api.app.schemas.book import BookCreate, BookRead
from library_catalog_api.app.services.author_service import (
    AuthorService,
    count_books_by_author,
    row_to_author_read,
)

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = (
    "Saving book failed. Please refer to this data's corresponding Schema "
    "to check which arguments violate rules"
)


class BookService:
    """Service class for listing and adding books."""

    @classmethod
    async def count_books(cls) -> int:
        conn = get_connection()
        try:
            row = conn.execute("SELECT COUNT(*) AS count FROM books").fetchone()
            return row["count"]
        finally:
            conn.close()

    @classmethod
    async def list_books(cls, author: Optional[str] = None, genre: Optional[str] = None) -> List[BookRead]:
        """Return books, optionally filtered by author name and/or genre.

        ``author`` must match an author's name exactly; a name that
        matches no author yields an empty list.  ``genre`` keeps books
        whose genre list contains it.  With neither filter every book is
        returned.
        """
        conn = get_connection()
        try:
            book_rows = conn.execute(
                "SELECT id, title, published, genres, author_id FROM books ORDER BY id"
            ).fetchall()
            author_rows = conn.execute("SELECT id, name, born FROM authors").fetchall()
        finally:
            conn.close()

        authors_by_id: Dict[int, sqlite3.Row] = {row["id"]: row for row in author_rows}
        counts = Counter(row["author_id"] for row in book_rows)

        books = book_rows
        if author:
            match = next((row for row in author_rows if row["name"] == author), None)
            if match is None:
                return []
            books = [row for row in books if row["author_id"] == match["id"]]
        if genre:
            books = [row for row in books if genre in json.loads(row["genres"])]

        return [
            cls._row_to_book_read(row, authors_by_id[row["author_id"]], counts[row["author_id"]])
            for row in books
        ]

    @classmethod
    async def add_book(cls, title: str, author: str, published: int, genres: List[str]) -> BookRead:
        """Add a book, creating its author first if the name is unknown.

        Raises ``DuplicateRecord`` if the title is taken and
        ``ValidationFailed`` if the book or a new author's name is
        invalid.  Nothing is written when an error is raised.
        """
        try:
            data = BookCreate(title=title, author=author, published=published, genres=genres)
        except ValidationError:
            raise ValidationFailed(SAVE_FAILED_MESSAGE)

        conn = get_connection()
        try:
            if conn.execute("SELECT 1 FROM books WHERE title = ?", (data.title,)).fetchone():
                raise DuplicateRecord("Book is already added", invalid_args=data.title)

            author_row = conn.execute(
                "SELECT id FROM authors WHERE name = ?",
                (data.author,),
            ).fetchone()
            if author_row:
                author_id = author_row["id"]
            else:
                author_id = AuthorService.insert_author(conn, data.author)

            try:
                cursor = conn.execute(
                    "INSERT INTO books (title, published, genres, author_id) VALUES (?, ?, ?, ?)",
                    (data.title, data.published, json.dumps(data.genres), author_id),
                )
            except sqlite3.IntegrityError:
                # Another request stored the same title after our check.
                raise DuplicateRecord("Book is already added", invalid_args=data.title)
            book_id = cursor.lastrowid
            conn.commit()
            logger.info("Added book %s (%s) by author %s", book_id, data.title, author_id)

            row = conn.execute(
                "SELECT id, title, published, genres, author_id FROM books WHERE id = ?",
                (book_id,),
            ).fetchone()
            author_row = conn.execute(
                "SELECT id, name, born FROM authors WHERE id = ?",
                (author_id,),
            ).fetchone()
            counts = count_books_by_author(conn)
            return cls._row_to_book_read(row, author_row, counts.get(author_id, 0))
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _row_to_book_read(row: sqlite3.Row, author_row: sqlite3.Row, book_count: int) -> BookRead:
        return BookRead(
            id=row["id"],
            title=row["title"],
            published=row["published"],
            genres=json.loads(row["genres"]),
            author=row_to_author_read(author_row, book_count),
        )
