"""
Collaborator contracts for the cache-aside core.

The core only ever talks to a backing store and a cache store through
these protocols, so any entity type with an integer identity can be
served by swapping in a different store and codec.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, TypeVar

E = TypeVar("E")


class BackingStore(Protocol[E]):
    """Authoritative persistent store for one entity collection.

    Implementations raise ``StoreUnavailableError`` on any connectivity
    or transaction failure.
    """

    async def list_ids(self) -> List[int]:
        """Return every identity in the store, ascending."""
        ...

    async def get_by_id(self, entity_id: int) -> Optional[E]:
        """Return the entity or None when absent."""
        ...

    async def get_many(self, entity_ids: Sequence[int]) -> List[E]:
        """Return the entities whose identity is in ``entity_ids``.

        Identities absent from the store contribute nothing.
        """
        ...

    async def add(self, entity: E) -> E:
        """Persist a new entity and return it with its assigned identity."""
        ...

    async def update(self, entity: E) -> bool:
        """Overwrite an existing entity. False when the identity is absent."""
        ...

    async def delete_by_id(self, entity_id: int) -> None:
        """Delete an entity. No-op when absent."""
        ...


class CacheStore(Protocol):
    """Best-effort string key/value cache.

    Implementations raise ``CacheUnavailableError`` on transport failure
    and never on a plain miss.
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class EntityCodec(Protocol[E]):
    """Serializes entities to cache values and exposes their identity."""

    def identity(self, entity: E) -> int:
        ...

    def dumps(self, entity: E) -> str:
        ...

    def loads(self, value: str) -> E:
        ...


@dataclass(frozen=True)
class CacheKeys:
    """Key layout for one entity collection."""

    id_list: str = "idlist"
    entity_prefix: str = "entity:"

    @classmethod
    def namespaced(cls, namespace: str) -> "CacheKeys":
        """Keys under ``<namespace>:`` so collections sharing a cache stay disjoint."""
        if not namespace:
            return cls()
        return cls(id_list=f"{namespace}:idlist", entity_prefix=f"{namespace}:entity:")

    def entity(self, entity_id: int) -> str:
        return f"{self.entity_prefix}{int(entity_id)}"
