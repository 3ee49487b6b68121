from apscheduler.schedulers.asyncio import AsyncIOScheduler
from warehouse.core.db import session_scope

from warehouse.repositories.sql_store import SqlWarehouseStore
from warehouse.services.inventory.expiry_service import refresh_expiry_statuses

scheduler = AsyncIOScheduler()


@scheduler.scheduled_job("cron", hour=0, minute=15)  # daily at 00:15
async def refresh_expiry_job():
    async with session_scope() as db:
        await refresh_expiry_statuses(SqlWarehouseStore(db))
