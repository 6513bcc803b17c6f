"""
Persistence package for the Books Service.

Backing stores are the authority of record for the catalog:

- postgres: asyncpg-backed store (production)
- memory: dict-backed store for local runs and tests
- seed: starter catalog loaded into an empty store
"""
