"""
PostgreSQL persistence layer for the Books Service.
"""

import asyncio
from typing import List, Optional, Sequence

import asyncpg

from shared.errors import StoreUnavailableError, ValidationError
from shared.logging import get_logger
from ..books.models import Book

# Range of the BIGINT id column; ids outside it cannot name a stored book.
MIN_BOOK_ID = -(2 ** 63)
MAX_BOOK_ID = 2 ** 63 - 1


def _storable_id(entity_id: int) -> bool:
    return MIN_BOOK_ID <= entity_id <= MAX_BOOK_ID


class PostgresBookStore:
    """Backing store for books on top of an asyncpg pool.

    Any driver, pool or transaction failure surfaces as
    ``StoreUnavailableError``. Arguments the driver refuses to encode
    surface as ``ValidationError``. Ids outside the BIGINT range match
    nothing.
    """

    def __init__(
        self,
        dsn: str,
        *,
        command_timeout: float = 30,
        min_size: int = 2,
        max_size: int = 10,
    ):
        self.dsn = dsn
        self.command_timeout = command_timeout
        self.min_size = min_size
        self.max_size = max_size
        self.logger = get_logger("books.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )

            await self._create_tables()

            self.logger.info("PostgreSQL persistence started")

        except (asyncpg.PostgresError, OSError) as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise StoreUnavailableError("Failed to start PostgreSQL persistence", {"error": str(e)})

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.logger.info("PostgreSQL persistence stopped")

    async def _create_tables(self):
        """Create database tables."""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS books (
                    id BIGSERIAL PRIMARY KEY,
                    title TEXT,
                    author TEXT,
                    publication_year INTEGER NOT NULL DEFAULT 0
                );
            """)

    async def list_ids(self) -> List[int]:
        rows = await self._fetch("list_ids", "SELECT id FROM books ORDER BY id ASC")
        return [row["id"] for row in rows]

    async def get_by_id(self, entity_id: int) -> Optional[Book]:
        if not _storable_id(entity_id):
            return None
        rows = await self._fetch(
            "get_by_id",
            "SELECT id, title, author, publication_year FROM books WHERE id = $1",
            entity_id,
        )
        return self._row_to_book(rows[0]) if rows else None

    async def get_many(self, entity_ids: Sequence[int]) -> List[Book]:
        entity_ids = [entity_id for entity_id in entity_ids if _storable_id(entity_id)]
        if not entity_ids:
            return []
        rows = await self._fetch(
            "get_many",
            """
                SELECT id, title, author, publication_year FROM books
                WHERE id = ANY($1::bigint[])
                ORDER BY id ASC
            """,
            entity_ids,
        )
        return [self._row_to_book(row) for row in rows]

    async def add(self, book: Book) -> Book:
        rows = await self._fetch(
            "add",
            """
                INSERT INTO books (title, author, publication_year)
                VALUES ($1, $2, $3)
                RETURNING id, title, author, publication_year
            """,
            book.title, book.author, book.publication_year,
        )
        stored = self._row_to_book(rows[0])
        self.logger.info("Book saved", id=stored.id, title=stored.title)
        return stored

    async def add_many(self, books: Sequence[Book]) -> None:
        """Insert several books in one transaction."""
        self._require_pool("add_many")
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(
                        "INSERT INTO books (title, author, publication_year) VALUES ($1, $2, $3)",
                        [(b.title, b.author, b.publication_year) for b in books],
                    )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Error inserting books", count=len(books), error=str(e))
            raise StoreUnavailableError("Error inserting books", {"error": str(e)})

    async def update(self, book: Book) -> bool:
        if book.id is None or not _storable_id(book.id):
            self.logger.warning("Book not found for update", id=book.id)
            return False
        result = await self._execute(
            "update",
            """
                UPDATE books SET title = $2, author = $3, publication_year = $4
                WHERE id = $1
            """,
            book.id, book.title, book.author, book.publication_year,
        )
        if result == "UPDATE 0":
            self.logger.warning("Book not found for update", id=book.id)
            return False
        return True

    async def delete_by_id(self, entity_id: int) -> None:
        if not _storable_id(entity_id):
            return
        result = await self._execute("delete_by_id", "DELETE FROM books WHERE id = $1", entity_id)
        if result == "DELETE 0":
            self.logger.debug("Book already absent", id=entity_id)

    async def count(self) -> int:
        rows = await self._fetch("count", "SELECT COUNT(*) AS total FROM books")
        return rows[0]["total"] or 0

    async def _fetch(self, operation: str, query: str, *args) -> List[asyncpg.Record]:
        self._require_pool(operation)
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetch(query, *args)
        except ValueError as e:
            raise self._rejected_input(operation, e)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Backing store query failed", operation=operation, error=str(e))
            raise StoreUnavailableError(f"Backing store {operation} failed", {"error": str(e)})

    async def _execute(self, operation: str, query: str, *args) -> str:
        self._require_pool(operation)
        try:
            async with self.pool.acquire() as conn:
                return await conn.execute(query, *args)
        except ValueError as e:
            raise self._rejected_input(operation, e)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Backing store command failed", operation=operation, error=str(e))
            raise StoreUnavailableError(f"Backing store {operation} failed", {"error": str(e)})

    def _rejected_input(self, operation: str, error: ValueError) -> ValidationError:
        # asyncpg reports arguments it cannot encode as a ValueError subclass.
        self.logger.warning("Backing store rejected query input", operation=operation, error=str(error))
        return ValidationError(f"Invalid input for {operation}", {"error": str(error)})

    def _require_pool(self, operation: str) -> None:
        if self.pool is None:
            raise StoreUnavailableError(f"Backing store {operation} failed", {"error": "pool not started"})

    def _row_to_book(self, row) -> Book:
        """Convert database row to Book object."""
        return Book(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            publication_year=row["publication_year"],
        )

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                return True
        except Exception:
            return False
