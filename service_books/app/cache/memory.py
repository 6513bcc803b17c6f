"""
In-process cache store for local runs and tests.
"""

from typing import Dict, Optional

from shared.logging import get_logger


class InMemoryCacheStore:
    """Dict-backed stand-in for Redis with the same string semantics."""

    def __init__(self):
        self.logger = get_logger("books.cache.memory")
        self.entries: Dict[str, str] = {}

    async def start(self):
        self.logger.info("In-memory cache started")

    async def stop(self):
        self.entries.clear()

    async def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    async def set(self, key: str, value: str) -> None:
        self.entries[key] = value

    async def delete(self, key: str) -> None:
        self.entries.pop(key, None)

    async def health_check(self) -> bool:
        return True
