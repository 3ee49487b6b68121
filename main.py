# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from warehouse.routers import (
    auth_router,
    product_router,
    inventory_batch_router,
    inventory_request_router,
    location_router,
    order_router,
    admin_router,
    state_router,
)
from warehouse.core.config import APP_ENV, APP_VERSION, CORS_ORIGINS, ENABLE_SCHEDULER, INVENTORY_API_URL
from warehouse.core.db import init_models
from warehouse.core.error_handlers import register_exception_handlers
from warehouse.core.logging import setup_logging
from warehouse.core.scheduler import scheduler
from warehouse.middleware.request_logging import request_logging_middleware

SERVICE_NAME = "warehouse-inventory-api"

ROUTERS = (
    auth_router,
    product_router,
    inventory_batch_router,
    inventory_request_router,
    location_router,
    order_router,
    admin_router,
    state_router,
)

setup_logging()
logger = logging.getLogger(__name__)


def _scheduler_enabled() -> bool:
    return APP_ENV != "production" or ENABLE_SCHEDULER


# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Warehouse API starting", extra={"env": APP_ENV, "version": APP_VERSION})

    if APP_ENV == "development":
        await init_models()
        logger.info("Tables created from models")

    logger.info(
        "Batch mutations routed to %s",
        INVENTORY_API_URL or "local database",
    )

    if _scheduler_enabled():
        scheduler.start()
        logger.info("Expiry scheduler running")

    yield

    if scheduler.running:
        scheduler.shutdown(wait=False)
    logger.info("Warehouse API stopped")


# ------------------------------------------------------------------------------
# APP
# ------------------------------------------------------------------------------
app = FastAPI(
    title="Warehouse Inventory API",
    description="Merchant stock, inbound/outbound requests and adjustments",
    version=APP_VERSION,
    docs_url=None if APP_ENV == "production" else "/docs",
    redoc_url=None,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.middleware("http")(request_logging_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ROUTERS:
    app.include_router(router)


@app.get("/", tags=["Health"])
async def health_check():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "environment": APP_ENV,
        "version": APP_VERSION,
    }
