"""
Shared fixtures for Books Service tests.
"""

import asyncio
from typing import List, Sequence

import pytest

from shared.errors import CacheUnavailableError
from shared.metrics import MetricsCollector
from service_books.app.books.models import Book, BookCodec
from service_books.app.cache.memory import InMemoryCacheStore
from service_books.app.core.service import EntityCacheService
from service_books.app.persistence.memory import InMemoryBookStore


class SpyBookStore(InMemoryBookStore):
    """In-memory store that records which reads reached it."""

    def __init__(self):
        super().__init__()
        self.list_ids_calls = 0
        self.get_by_id_calls: List[int] = []
        self.get_many_calls: List[List[int]] = []

    async def list_ids(self):
        self.list_ids_calls += 1
        return await super().list_ids()

    async def get_by_id(self, entity_id: int):
        self.get_by_id_calls.append(entity_id)
        return await super().get_by_id(entity_id)

    async def get_many(self, entity_ids: Sequence[int]):
        self.get_many_calls.append(list(entity_ids))
        return await super().get_many(entity_ids)


class FailingCacheStore:
    """Cache whose transport is down for every call."""

    def __init__(self):
        self.calls = 0

    async def get(self, key):
        self.calls += 1
        raise CacheUnavailableError("connection refused", {"key": key})

    async def set(self, key, value):
        self.calls += 1
        raise CacheUnavailableError("connection refused", {"key": key})

    async def delete(self, key):
        self.calls += 1
        raise CacheUnavailableError("connection refused", {"key": key})


class HangingCacheStore:
    """Cache that never answers."""

    async def get(self, key):
        await asyncio.sleep(60)

    async def set(self, key, value):
        await asyncio.sleep(60)

    async def delete(self, key):
        await asyncio.sleep(60)


def catalog() -> List[Book]:
    return [
        Book(title="A", author="Author A", publication_year=1901),
        Book(title="B", author="Author B", publication_year=1902),
        Book(title="C", author="Author C", publication_year=1903),
    ]


@pytest.fixture
def store():
    """Spy store preloaded with books 1:A, 2:B, 3:C."""
    spy = SpyBookStore()
    for book in catalog():
        spy._books[spy._next_id] = Book(
            id=spy._next_id,
            title=book.title,
            author=book.author,
            publication_year=book.publication_year,
        )
        spy._next_id += 1
    return spy


@pytest.fixture
def cache():
    return InMemoryCacheStore()


@pytest.fixture
def metrics():
    return MetricsCollector("books")


@pytest.fixture
def service(store, cache, metrics):
    return EntityCacheService(store, cache, BookCodec(), metrics=metrics)


@pytest.fixture
def empty_store():
    return SpyBookStore()


@pytest.fixture
def failing_cache():
    return FailingCacheStore()


@pytest.fixture
def hanging_cache():
    return HangingCacheStore()
