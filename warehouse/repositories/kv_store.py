# warehouse/repositories/kv_store.py

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.models.support.app_state_models import AppState


class SqlKeyValueStore:
    """Client key/value state backed by the ``app_state`` table.

    Every ``set`` is committed on its own so one failing key never takes
    earlier writes down with it.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[str]:
        row = await self.db.get(AppState, key)
        return row.value if row else None

    async def set(self, key: str, value: str) -> None:
        row = await self.db.get(AppState, key)
        if row is None:
            self.db.add(AppState(key=key, value=value))
        else:
            row.value = value
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def items(self) -> list[tuple[str, str]]:
        result = await self.db.execute(select(AppState).order_by(AppState.key))
        return [(row.key, row.value) for row in result.scalars().all()]
