from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.config import INVENTORY_API_URL
from warehouse.core.db import get_db
from warehouse.repositories.sql_store import SqlWarehouseStore
from warehouse.repositories.kv_store import SqlKeyValueStore
from warehouse.repositories.inventory_gateway import SqlInventoryGateway, HttpInventoryGateway


async def get_store(db: AsyncSession = Depends(get_db)) -> SqlWarehouseStore:
    return SqlWarehouseStore(db)


async def get_kv_store(db: AsyncSession = Depends(get_db)) -> SqlKeyValueStore:
    return SqlKeyValueStore(db)


async def get_inventory_gateway(db: AsyncSession = Depends(get_db)):
    """HTTP gateway when INVENTORY_API_URL is configured, local database otherwise."""
    if INVENTORY_API_URL:
        return HttpInventoryGateway(INVENTORY_API_URL)
    return SqlInventoryGateway(db)
