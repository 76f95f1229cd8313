"""
Narrow key-value persistence for the cart.

The store only ever needs load() and save() of one opaque payload, so any
medium works: memory, a database row, a browser-side bridge.

Redis implementation, for example:

    class RedisStorage:
        def __init__(self, client: Redis, key: str = "cart"):
            self.client = client
            self.key = key

        async def load(self) -> Result[str | None, StorageError]:
            try:
                data = await self.client.get(self.key)
                return Ok(data.decode() if data else None)
            except Exception as e:
                return Error(StorageError(f"Failed to load: {e}", e))

        async def save(self, payload: str) -> Result[None, StorageError]:
            ...
"""

from __future__ import annotations

from typing import Protocol

from kungfu import Result, Ok

from mealcart.errors import StorageError


class CartStorage(Protocol):
    async def load(self) -> Result[str | None, StorageError]:
        """Stored payload, or Ok(None) if nothing was saved yet."""
        ...

    async def save(self, payload: str) -> Result[None, StorageError]:
        ...


class MemoryStorage:
    """In-process storage. Useful for tests and server-side sessions."""

    __slots__ = ("payload", "saves")

    def __init__(self, payload: str | None = None) -> None:
        self.payload = payload
        self.saves = 0

    async def load(self) -> Result[str | None, StorageError]:
        return Ok(self.payload)

    async def save(self, payload: str) -> Result[None, StorageError]:
        self.payload = payload
        self.saves += 1
        return Ok(None)


__all__ = ("CartStorage", "MemoryStorage")
