"""
Cache-aside orchestration for one entity collection.

Reads try the cache first and fall back to the backing store, filling
the cache on the way out. Writes go to the backing store and then delete
the cache entries they made stale. The backing store is always the
authority; every cache call is best-effort and its failures are logged
and counted, never raised.
"""

import asyncio
import json
from contextlib import nullcontext
from typing import Dict, Generic, List, Optional, TYPE_CHECKING

from shared.errors import EntityNotFoundError, ValidationError
from shared.logging import get_logger

from .contracts import BackingStore, CacheKeys, CacheStore, E, EntityCodec

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_CACHE_TIMEOUT = 2.0


def _is_entity_id(value) -> bool:
    # JSON true/false decode to bool, which is an int subclass.
    return isinstance(value, int) and not isinstance(value, bool)


class EntityCacheService(Generic[E]):
    """Cache-aside data access over a backing store and a cache store."""

    def __init__(
        self,
        store: BackingStore[E],
        cache: CacheStore,
        codec: EntityCodec[E],
        *,
        keys: Optional[CacheKeys] = None,
        cache_timeout: float = DEFAULT_CACHE_TIMEOUT,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.store = store
        self.cache = cache
        self.codec = codec
        self.keys = keys or CacheKeys()
        self.cache_timeout = cache_timeout
        self.metrics = metrics
        self.logger = get_logger("books.core.cache_service")

    async def list_all(self) -> List[E]:
        """Return every entity, ascending by identity, whatever the cache holds."""
        entity_ids = await self._load_id_list()
        if not entity_ids:
            return []

        entity_keys = [self.keys.entity(entity_id) for entity_id in entity_ids]
        cached_values = await asyncio.gather(
            *(self._cache_get(key) for key in entity_keys)
        )

        found: Dict[int, E] = {}
        missing: List[int] = []
        for entity_id, key, value in zip(entity_ids, entity_keys, cached_values):
            entity = self._decode_entity(entity_id, key, value)
            if entity is None:
                missing.append(entity_id)
            else:
                found[entity_id] = entity

        self._count("cache_hits_total", cache_type="entity", amount=len(found))
        self._count("cache_misses_total", cache_type="entity", amount=len(missing))

        if missing:
            with self._timed("get_many"):
                fetched = await self.store.get_many(missing)
            await asyncio.gather(*(self._fill(entity) for entity in fetched))
            for entity in fetched:
                found[self.codec.identity(entity)] = entity

            # Ids from a stale id list that the store no longer has are dropped.
            dropped = len(missing) - len(fetched)
            if dropped:
                self.logger.debug("Dropped ids absent from backing store", count=dropped)

        return [found[entity_id] for entity_id in sorted(found)]

    async def get_by_id(self, entity_id: int) -> E:
        """Return one entity or raise ``EntityNotFoundError``."""
        key = self.keys.entity(entity_id)
        entity = self._decode_entity(entity_id, key, await self._cache_get(key))
        if entity is not None:
            self._count("cache_hits_total", cache_type="entity")
            return entity

        self._count("cache_misses_total", cache_type="entity")
        with self._timed("get_by_id"):
            entity = await self.store.get_by_id(entity_id)
        if entity is None:
            # Negative results are not cached; a later add must be visible.
            raise EntityNotFoundError(entity_id)

        await self._fill(entity)
        return entity

    async def add(self, entity: E) -> E:
        """Persist a new entity and invalidate the id list.

        The new entity's own cache entry is filled lazily by the next read.
        """
        stored = await self.store.add(entity)
        await self._invalidate(self.keys.id_list, "idlist")
        self.logger.info("Entity added", id=self.codec.identity(stored))
        return stored

    async def update(self, entity: E) -> None:
        """Overwrite an existing entity and invalidate only its own entry."""
        entity_id = self.codec.identity(entity)
        if entity_id is None:
            raise ValidationError("Entity identity is required for update")

        if not await self.store.update(entity):
            raise EntityNotFoundError(entity_id)

        # The id set is unchanged, so the id list stays valid.
        await self._invalidate(self.keys.entity(entity_id), "entity")
        self.logger.info("Entity updated", id=entity_id)

    async def delete_by_id(self, entity_id: int) -> None:
        """Delete an entity (idempotent) and invalidate both affected entries."""
        await self.store.delete_by_id(entity_id)
        await self._invalidate(self.keys.id_list, "idlist")
        await self._invalidate(self.keys.entity(entity_id), "entity")
        self.logger.info("Entity deleted", id=entity_id)

    async def invalidate_id_list(self) -> None:
        """Drop the cached id list, e.g. after bulk loading the store directly."""
        await self._invalidate(self.keys.id_list, "idlist")

    async def _load_id_list(self) -> List[int]:
        cached = await self._cache_get(self.keys.id_list)
        entity_ids = self._decode_id_list(cached)
        if entity_ids is not None:
            self._count("cache_hits_total", cache_type="idlist")
            return entity_ids

        self._count("cache_misses_total", cache_type="idlist")
        with self._timed("list_ids"):
            entity_ids = await self.store.list_ids()
        await self._cache_set(self.keys.id_list, json.dumps(entity_ids))
        return entity_ids

    def _decode_id_list(self, value: Optional[str]) -> Optional[List[int]]:
        if value is None:
            return None
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError) as exc:
            self.logger.warning("Discarding unreadable id list", key=self.keys.id_list, error=str(exc))
            return None

        if not isinstance(decoded, list) or not all(_is_entity_id(item) for item in decoded):
            self.logger.warning("Discarding malformed id list", key=self.keys.id_list)
            return None
        return decoded

    def _decode_entity(self, entity_id: int, key: str, value: Optional[str]) -> Optional[E]:
        """Decode a cached entity; anything unusable for ``entity_id`` is a miss."""
        if value is None:
            return None
        try:
            entity = self.codec.loads(value)
        except (TypeError, ValueError, KeyError) as exc:
            self.logger.warning("Discarding unreadable cache entry", key=key, error=str(exc))
            return None

        cached_id = self.codec.identity(entity)
        if cached_id != entity_id:
            self.logger.warning(
                "Discarding cache entry for another identity",
                key=key,
                cached_id=cached_id,
            )
            return None
        return entity

    async def _fill(self, entity: E) -> None:
        key = self.keys.entity(self.codec.identity(entity))
        await self._cache_set(key, self.codec.dumps(entity))

    async def _invalidate(self, key: str, cache_type: str) -> None:
        if await self._cache_delete(key):
            self._count("cache_invalidations_total", cache_type=cache_type)

    async def _cache_get(self, key: str) -> Optional[str]:
        """Read from cache; any failure reads as a miss."""
        try:
            return await asyncio.wait_for(self.cache.get(key), self.cache_timeout)
        except Exception as exc:
            self._cache_failed("get", key, exc)
            return None

    async def _cache_set(self, key: str, value: str) -> bool:
        """Fill the cache, best-effort."""
        try:
            await asyncio.wait_for(self.cache.set(key, value), self.cache_timeout)
            return True
        except Exception as exc:
            self._cache_failed("set", key, exc)
            return False

    async def _cache_delete(self, key: str) -> bool:
        """Invalidate a cache key, best-effort."""
        try:
            await asyncio.wait_for(self.cache.delete(key), self.cache_timeout)
            return True
        except Exception as exc:
            self._cache_failed("delete", key, exc)
            return False

    def _cache_failed(self, operation: str, key: str, exc: Exception) -> None:
        self.logger.warning(
            "Cache operation failed; continuing without cache",
            operation=operation,
            key=key,
            error=str(exc) or type(exc).__name__,
        )
        self._count("cache_errors_total", operation=operation)

    def _count(self, metric_name: str, amount: int = 1, **labels) -> None:
        if self.metrics and amount:
            self.metrics.increment_counter(metric_name, amount=amount, **labels)

    def _timed(self, operation: str):
        if not self.metrics:
            return nullcontext()
        return self.metrics.time_operation("store_fetch_duration_seconds", operation=operation)
