"""
Books service: HTTP surface over the cache-aside book catalog.
"""

from typing import List, Optional

from fastapi import Response, status

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import ValidationError

from .books.models import Book, BookCodec, BookCreateRequest, BookResponse, BookUpdateRequest
from .cache.memory import InMemoryCacheStore
from .cache.redis_cache import RedisCacheStore
from .core.contracts import CacheKeys
from .core.service import EntityCacheService
from .persistence.memory import InMemoryBookStore
from .persistence.postgres import PostgresBookStore
from .persistence.seed import seed_if_empty


class BooksService(BaseService):
    """Books service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, *, store=None, cache=None):
        super().__init__("books", 8020, config)

        # Initialize components
        self.store = store if store is not None else self._build_store()
        self.cache = cache if cache is not None else self._build_cache()
        self.books: EntityCacheService[Book] = EntityCacheService(
            self.store,
            self.cache,
            BookCodec(),
            keys=CacheKeys.namespaced(self.config.cache_key_namespace),
            cache_timeout=self.config.cache_timeout_seconds,
            metrics=self.metrics,
        )

        self._setup_books_routes()

    def _build_store(self):
        if self.config.store_backend == "memory":
            return InMemoryBookStore()
        return PostgresBookStore(
            self.config.postgres_dsn,
            command_timeout=self.config.store_timeout_seconds,
            min_size=self.config.store_pool_min_size,
            max_size=self.config.store_pool_max_size,
        )

    def _build_cache(self):
        if self.config.cache_backend == "memory":
            return InMemoryCacheStore()
        return RedisCacheStore(self.config.redis_url, socket_timeout=self.config.cache_timeout_seconds)

    def _setup_books_routes(self):
        """Set up book catalog routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "books",
                "message": "Books Service",
                "version": "1.0.0",
                "capabilities": ["catalog", "caching", "persistence"]
            }

        @self.app.get("/books", response_model=List[BookResponse])
        async def list_books():
            """List every book, ascending by id."""
            return await self.books.list_all()

        @self.app.get("/books/{book_id}", response_model=BookResponse)
        async def get_book(book_id: int):
            """Get one book."""
            return await self.books.get_by_id(book_id)

        @self.app.post("/books", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
        async def add_book(request: BookCreateRequest, response: Response):
            """Add a book; the store assigns its id."""
            book = await self.books.add(request.to_book())
            response.headers["Location"] = f"/books/{book.id}"
            return book

        @self.app.put("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def update_book(book_id: int, request: BookUpdateRequest):
            """Replace a book."""
            if request.id != book_id:
                raise ValidationError(
                    "Path id does not match body id",
                    {"path_id": book_id, "body_id": request.id}
                )
            await self.books.update(request.to_book())
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        @self.app.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_book(book_id: int):
            """Delete a book. Deleting an absent book succeeds."""
            await self.books.delete_by_id(book_id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def _check_dependencies(self):
        """Check books service dependencies."""
        dependencies = {}

        try:
            dependencies["cache"] = "ok" if await self.cache.health_check() else "error"
        except Exception:
            dependencies["cache"] = "error"

        try:
            dependencies["store"] = "ok" if await self.store.health_check() else "error"
        except Exception:
            dependencies["store"] = "error"

        return dependencies

    async def start(self):
        """Start books service components."""
        await self.store.start()
        await self.cache.start()

        if self.config.seed_on_startup and await seed_if_empty(self.store):
            # Seeding bypasses the cache-aside service, so drop any stale id list.
            await self.books.invalidate_id_list()

        self.logger.info("Books service started")

    async def stop(self):
        """Stop books service components."""
        await self.cache.stop()
        await self.store.stop()

        self.logger.info("Books service stopped")


def create_app(config: Optional[ServiceConfig] = None):
    """Create books service application."""
    service = BooksService(config)
    return service.app


if __name__ == "__main__":
    service = BooksService()
    service.run()
