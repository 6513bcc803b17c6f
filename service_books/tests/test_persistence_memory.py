"""
Unit tests for the in-memory book store and seed loading.
"""

import pytest

from service_books.app.books.models import Book
from service_books.app.persistence.memory import InMemoryBookStore
from service_books.app.persistence.seed import sample_books, seed_if_empty


class TestInMemoryBookStore:
    """Test cases for InMemoryBookStore."""

    @pytest.mark.asyncio
    async def test_add_assigns_increasing_ids(self):
        store = InMemoryBookStore()

        first = await store.add(Book(title="A"))
        second = await store.add(Book(title="B"))

        assert (first.id, second.id) == (1, 2)
        assert await store.list_ids() == [1, 2]

    @pytest.mark.asyncio
    async def test_ids_never_reused(self):
        store = InMemoryBookStore()
        await store.add(Book(title="A"))
        await store.delete_by_id(1)

        again = await store.add(Book(title="B"))

        assert again.id == 2

    @pytest.mark.asyncio
    async def test_returned_books_are_copies(self):
        store = InMemoryBookStore()
        stored = await store.add(Book(title="A"))
        stored.title = "mutated"

        assert (await store.get_by_id(1)).title == "A"

    @pytest.mark.asyncio
    async def test_get_many_ignores_unknown_ids(self):
        store = InMemoryBookStore()
        await store.add(Book(title="A"))
        await store.add(Book(title="B"))

        books = await store.get_many([2, 5, 1])

        assert [b.id for b in books] == [1, 2]

    @pytest.mark.asyncio
    async def test_update_absent(self):
        store = InMemoryBookStore()

        assert await store.update(Book(id=3, title="X")) is False


class TestSeed:
    """Test cases for seed loading."""

    @pytest.mark.asyncio
    async def test_seeds_empty_store(self):
        store = InMemoryBookStore()

        inserted = await seed_if_empty(store)

        assert inserted == len(sample_books()) == 10
        assert (await store.get_by_id(1)).title == "The Great Gatsby"
        assert (await store.get_by_id(10)).author == "J.R.R. Tolkien"

    @pytest.mark.asyncio
    async def test_does_not_seed_twice(self):
        store = InMemoryBookStore()
        await store.add(Book(title="Existing"))

        assert await seed_if_empty(store) == 0
        assert await store.count() == 1
