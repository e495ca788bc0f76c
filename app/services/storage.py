import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import CartStorageSlot

logger = logging.getLogger(__name__)


class CartStorage:
    """Durable key/value slot backed by the cart_storage table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], key: str):
        self.session_factory = session_factory
        self.key = key

    async def get(self) -> Optional[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(CartStorageSlot.value).where(CartStorageSlot.key == self.key)
            )
            return result.scalar_one_or_none()

    async def set(self, value: str) -> None:
        """Replace the stored value in a single transaction."""
        async with self.session_factory() as session:
            async with session.begin():
                await session.merge(CartStorageSlot(key=self.key, value=value))
        logger.debug(f"Stored {len(value)} bytes under {self.key}")
