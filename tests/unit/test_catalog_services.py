import sqlite3

import pytest

from library_catalog_api.app.core.db import get_connection, init_db
from library_catalog_api.app.core.errors import DuplicateRecord, ValidationFailed
from library_catalog_api.app.services import book_service
from library_catalog_api.app.services.author_service import AuthorService
from library_catalog_api.app.services.book_service import BookService


def table_count(table):
    conn = get_connection()
    try:
        return conn.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()["count"]
    finally:
        conn.close()


class StaleReadConnection:
    """Connection whose lookups starting with ``stale_prefix`` find no rows.

    Stands in for a concurrent request that wrote the row between our
    check and our insert.
    """

    def __init__(self, conn, stale_prefix):
        self._conn = conn
        self._stale_prefix = stale_prefix

    def execute(self, sql, params=()):
        if sql.startswith(self._stale_prefix):
            return self._conn.execute("SELECT 1 WHERE 0")
        return self._conn.execute(sql, params)

    def __getattr__(self, name):
        return getattr(self._conn, name)


@pytest.fixture
def stale_reads(monkeypatch):
    def install(prefix):
        monkeypatch.setattr(
            book_service, "get_connection", lambda: StaleReadConnection(get_connection(), prefix)
        )

    return install


@pytest.fixture
def catalog(database):
    """A small catalog: two books by Herbert, one by Le Guin."""

    async def populate():
        await BookService.add_book("Dune", "Frank Herbert", 1965, ["scifi", "classic"])
        await BookService.add_book("Dune Messiah", "Frank Herbert", 1969, ["scifi"])
        await BookService.add_book("A Wizard of Earthsea", "Ursula K. Le Guin", 1968, ["fantasy", "classic"])

    return populate


class TestMigrations:
    def test_init_db_is_idempotent(self, database):
        init_db()

        conn = get_connection()
        try:
            versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        finally:
            conn.close()
        assert versions == [1, 2]

    def test_book_must_reference_existing_author(self, database):
        conn = get_connection()
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO books (title, published, genres, author_id) VALUES ('Orphan', 2000, '[]', 42)"
                )
        finally:
            conn.close()


class TestBookService:
    @pytest.mark.asyncio
    async def test_add_book_creates_missing_author(self, database):
        book = await BookService.add_book("Dune", "Frank Herbert", 1965, ["scifi"])

        assert book.title == "Dune"
        assert book.published == 1965
        assert book.genres == ["scifi"]
        assert book.author.name == "Frank Herbert"
        assert book.author.born is None
        assert book.author.book_count == 1
        assert await AuthorService.count_authors() == 1

    @pytest.mark.asyncio
    async def test_add_book_reuses_existing_author(self, catalog):
        await catalog()

        book = await BookService.add_book("Children of Dune", "Frank Herbert", 1976, [])

        assert book.author.book_count == 3
        assert await AuthorService.count_authors() == 2
        assert await BookService.count_books() == 4

    @pytest.mark.asyncio
    async def test_duplicate_title_writes_nothing(self, catalog):
        await catalog()

        with pytest.raises(DuplicateRecord) as excinfo:
            await BookService.add_book("Dune", "Brian Herbert", 1999, ["scifi"])

        assert excinfo.value.invalid_args == "Dune"
        assert table_count("books") == 3
        assert table_count("authors") == 2

    @pytest.mark.asyncio
    async def test_title_taken_after_check_is_duplicate(self, catalog, stale_reads):
        await catalog()
        stale_reads("SELECT 1 FROM books")

        with pytest.raises(DuplicateRecord) as excinfo:
            await BookService.add_book("Dune", "Brian Herbert", 1999, ["scifi"])

        assert excinfo.value.invalid_args == "Dune"
        assert table_count("books") == 3
        assert table_count("authors") == 2

    @pytest.mark.asyncio
    async def test_author_created_after_check_is_reused(self, catalog, stale_reads):
        await catalog()
        stale_reads("SELECT id FROM authors WHERE name")

        book = await BookService.add_book("Children of Dune", "Frank Herbert", 1976, ["scifi"])

        assert book.author.name == "Frank Herbert"
        assert book.author.book_count == 3
        assert table_count("authors") == 2

    @pytest.mark.asyncio
    async def test_short_author_name_is_rejected(self, database):
        with pytest.raises(ValidationFailed) as excinfo:
            await BookService.add_book("Ubik", "Dick", 1969, ["scifi"])

        assert excinfo.value.invalid_args == "Dick"
        assert table_count("authors") == 0
        assert table_count("books") == 0

    @pytest.mark.asyncio
    async def test_empty_title_is_rejected(self, database):
        with pytest.raises(ValidationFailed):
            await BookService.add_book("", "Frank Herbert", 1965, [])

        assert table_count("authors") == 0

    @pytest.mark.asyncio
    async def test_list_books_without_filters_returns_everything(self, catalog):
        await catalog()

        books = await BookService.list_books()

        assert [book.title for book in books] == ["Dune", "Dune Messiah", "A Wizard of Earthsea"]
        assert {book.author.name: book.author.book_count for book in books} == {
            "Frank Herbert": 2,
            "Ursula K. Le Guin": 1,
        }

    @pytest.mark.asyncio
    async def test_list_books_by_author(self, catalog):
        await catalog()

        books = await BookService.list_books(author="Frank Herbert")

        assert [book.title for book in books] == ["Dune", "Dune Messiah"]

    @pytest.mark.asyncio
    async def test_list_books_by_genre(self, catalog):
        await catalog()

        books = await BookService.list_books(genre="classic")

        assert [book.title for book in books] == ["Dune", "A Wizard of Earthsea"]

    @pytest.mark.asyncio
    async def test_list_books_by_author_and_genre(self, catalog):
        await catalog()

        books = await BookService.list_books(author="Frank Herbert", genre="classic")

        assert [book.title for book in books] == ["Dune"]

    @pytest.mark.asyncio
    async def test_unknown_author_matches_nothing(self, catalog):
        await catalog()

        assert await BookService.list_books(author="Nobody Known") == []


class TestAuthorService:
    @pytest.mark.asyncio
    async def test_book_counts_match_books(self, catalog):
        await catalog()

        authors = await AuthorService.list_authors()

        conn = get_connection()
        try:
            for author in authors:
                expected = conn.execute(
                    "SELECT COUNT(*) AS count FROM books WHERE author_id = ?", (author.id,)
                ).fetchone()["count"]
                assert author.book_count == expected
        finally:
            conn.close()
        assert [author.book_count for author in authors] == [2, 1]

    @pytest.mark.asyncio
    async def test_set_born_updates_author(self, catalog):
        await catalog()

        author = await AuthorService.set_born("Frank Herbert", 1920)

        assert author.born == 1920
        assert author.book_count == 2
        listed = {a.name: a.born for a in await AuthorService.list_authors()}
        assert listed["Frank Herbert"] == 1920

    @pytest.mark.asyncio
    async def test_set_born_for_unknown_author_changes_nothing(self, catalog):
        await catalog()
        before = await AuthorService.list_authors()

        assert await AuthorService.set_born("Nobody Known", 1900) is None
        assert await AuthorService.list_authors() == before
