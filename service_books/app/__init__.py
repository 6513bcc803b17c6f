"""
Books Service package.

Serves a catalog of books from PostgreSQL with Redis in front of it,
using the cache-aside pattern:

- app.main: API surface for the catalog and health.
- app.core: the cache-aside orchestration and its collaborator contracts.
- app.books: Book model, request/response models and cache codec.
- app.cache: Redis-backed and in-memory cache stores.
- app.persistence: PostgreSQL and in-memory backing stores, seed data.

Guidelines:
- The backing store is the authority; cache entries must always be
  safe to drop and re-derive.
- Cache failures degrade latency, never results.
"""
