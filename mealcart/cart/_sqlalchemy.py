"""
SQLAlchemy cart storage, one row per storage key.

    storage = await SQLAlchemyStorage.connect("sqlite+aiosqlite:///carts.db", key="cart")
    store = CartStore(storage)
"""

from __future__ import annotations

from datetime import datetime, UTC

from sqlalchemy import select, String, DateTime, Text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from mealcart.errors import StorageError


class Base(DeclarativeBase):
    pass


class CartSnapshotTable(Base):
    __tablename__ = "cart_snapshots"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class SQLAlchemyStorage:
    """CartStorage backed by an async SQLAlchemy engine."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        key: str = "cart",
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._key = key
        self._engine = engine

    @classmethod
    async def connect(cls, url: str, key: str = "cart") -> SQLAlchemyStorage:
        """Create the engine, ensure the table exists, return a storage."""
        engine = create_async_engine(url, echo=False)
        await create_tables(engine)
        return cls(async_sessionmaker(engine, expire_on_commit=False), key, engine)

    async def close(self) -> None:
        """Dispose the engine if this storage created it."""
        if self._engine is not None:
            await self._engine.dispose()

    async def load(self) -> Result[str | None, StorageError]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(CartSnapshotTable.payload).where(CartSnapshotTable.key == self._key)
                )
                return Ok(result.scalar_one_or_none())
        except Exception as e:
            return Error(StorageError(f"Failed to load cart {self._key!r}: {e}", e))

    async def save(self, payload: str) -> Result[None, StorageError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(CartSnapshotTable, self._key)
                now = datetime.now(UTC).replace(tzinfo=None)
                if row is None:
                    session.add(CartSnapshotTable(key=self._key, payload=payload, updated_at=now))
                else:
                    row.payload = payload
                    row.updated_at = now
                await session.commit()
                return Ok(None)
        except Exception as e:
            return Error(StorageError(f"Failed to save cart {self._key!r}: {e}", e))


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = ("Base", "CartSnapshotTable", "SQLAlchemyStorage", "create_tables")
