"""
In-process backing store for local runs and tests.
"""

import asyncio
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from shared.logging import get_logger
from ..books.models import Book


class InMemoryBookStore:
    """Dict-backed book store.

    Identities come from a counter that only grows, so a deleted id is
    never handed out again for the lifetime of the store.
    """

    def __init__(self):
        self.logger = get_logger("books.persistence.memory")
        self._books: Dict[int, Book] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def start(self):
        self.logger.info("In-memory persistence started")

    async def stop(self):
        self.logger.info("In-memory persistence stopped")

    async def list_ids(self) -> List[int]:
        return sorted(self._books)

    async def get_by_id(self, entity_id: int) -> Optional[Book]:
        book = self._books.get(entity_id)
        return replace(book) if book else None

    async def get_many(self, entity_ids: Sequence[int]) -> List[Book]:
        wanted = set(entity_ids)
        return [replace(self._books[i]) for i in sorted(self._books) if i in wanted]

    async def add(self, book: Book) -> Book:
        async with self._lock:
            stored = replace(book, id=self._next_id)
            self._next_id += 1
            self._books[stored.id] = stored
        return replace(stored)

    async def add_many(self, books: Sequence[Book]) -> None:
        for book in books:
            await self.add(book)

    async def update(self, book: Book) -> bool:
        if book.id not in self._books:
            return False
        self._books[book.id] = replace(book)
        return True

    async def delete_by_id(self, entity_id: int) -> None:
        self._books.pop(entity_id, None)

    async def count(self) -> int:
        return len(self._books)

    async def health_check(self) -> bool:
        return True
