"""
Cache-aside core: ``EntityCacheService`` and the store/cache contracts it
composes.
"""

from .contracts import BackingStore, CacheKeys, CacheStore, EntityCodec
from .service import EntityCacheService

__all__ = ["BackingStore", "CacheKeys", "CacheStore", "EntityCodec", "EntityCacheService"]
