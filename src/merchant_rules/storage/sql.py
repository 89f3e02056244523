"""SQL-backed key-value store using async SQLAlchemy."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from merchant_rules.db.session import build_sessionmaker
from merchant_rules.models.base import Base
from merchant_rules.models.key_value import KeyValueEntry

logger = logging.getLogger(__name__)


class SqlKeyValueStore:
    """KeyValueStore persisting entries in the ``key_value_entries`` table.

    Each call opens its own session, so the store is safe to share across
    concurrent tasks. Database errors propagate unchanged.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        sessionmaker: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.engine = engine
        self.sessionmaker = sessionmaker or build_sessionmaker(engine)

    async def init_schema(self) -> None:
        """Create the backing table if it does not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def get(self, key: str) -> str | None:
        async with self.sessionmaker() as session:
            result = await session.execute(
                select(KeyValueEntry.value).where(KeyValueEntry.key == key)
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self.sessionmaker() as session:
            async with session.begin():
                entry = await session.get(KeyValueEntry, key)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
        logger.debug("Stored value", extra={"storage_key": key, "size": len(value)})

    async def close(self) -> None:
        await self.engine.dispose()
