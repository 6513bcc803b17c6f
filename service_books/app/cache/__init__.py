"""
Cache package for the Books Service.

Provides a Redis-backed string cache and an in-memory equivalent. Both
are plain get/set/delete stores; deciding what to cache and when to
invalidate is the job of ``app.core.service.EntityCacheService``.
"""
