# warehouse/services/inventory/inventory_batch_service.py

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.models.inventory.inventory_batch_models import InventoryBatch
from warehouse.schemas.inventory.inventory_batch_schemas import (
    BatchOut,
    BatchUpdate,
    BatchCreate,
    InventoryAddRequest,
)
from warehouse.core.exceptions import AppException, BatchNotFoundError, ValidationError
from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.activity_codes import ActivityCode
from warehouse.services.inventory.expiry_service import compute_expiry_status
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.ids import new_id
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


def _map_batch(batch: InventoryBatch) -> BatchOut:
    return BatchOut(
        id=batch.id,
        product_id=batch.product_id,
        merchant_id=batch.merchant_id,
        quantity=batch.quantity,
        location=batch.location or "",
        min_stock_level=batch.min_stock_level or 0,
        max_stock_level=batch.max_stock_level or 0,
        expiry_date=batch.expiry_date,
        expiry_status=batch.expiry_status,
        last_adjustment=batch.last_adjustment,
        version=batch.version,
    )


def _sync_expiry_status(batch: InventoryBatch) -> None:
    batch.expiry_status = compute_expiry_status(batch.expiry_date, date.today())


# =====================================================
# PARTIAL UPDATE (PATCH /api/inventory/{batch_id})
# =====================================================
async def update_batch(db: AsyncSession, batch_id: str, payload: BatchUpdate) -> BatchOut:
    batch = await db.get(InventoryBatch, batch_id)
    if not batch:
        logger.info("Batch update on unknown id", extra={"batch_id": batch_id})
        raise BatchNotFoundError(batch_id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(batch, field, value)
    _sync_expiry_status(batch)

    # Informational only, there is no compare-and-swap on this endpoint.
    batch.version += 1

    await db.commit()
    await db.refresh(batch)

    logger.debug("Batch updated", extra={"batch_id": batch_id, "fields": sorted(changes)})
    return _map_batch(batch)


# =====================================================
# CREATE WITH CLIENT ID (POST /api/inventory/{batch_id})
# =====================================================
async def create_batch(db: AsyncSession, batch_id: str, payload: BatchCreate) -> BatchOut:
    if await db.get(InventoryBatch, batch_id):
        raise AppException(
            409,
            f"Inventory batch {batch_id} already exists",
            ErrorCode.BATCH_EXISTS,
        )

    batch = InventoryBatch(id=batch_id, version=1, **payload.model_dump())
    _sync_expiry_status(batch)
    db.add(batch)

    await db.commit()
    await db.refresh(batch)

    logger.info("Batch created", extra={"batch_id": batch_id, "product_id": payload.product_id})
    return _map_batch(batch)


# =====================================================
# ADD STOCK (merge into the merchant's batch for the product)
# =====================================================
async def add_inventory_item(db: AsyncSession, payload: InventoryAddRequest, actor) -> BatchOut:
    merchant_id = payload.merchant_id if (actor and actor.is_admin and payload.merchant_id) else None
    if merchant_id is None and actor is not None:
        merchant_id = actor.merchant_id
    if not merchant_id:
        raise ValidationError("Sign in as a merchant to add inventory", ErrorCode.UNAUTHENTICATED)

    existing = await db.scalar(
        select(InventoryBatch)
        .where(
            InventoryBatch.merchant_id == merchant_id,
            InventoryBatch.product_id == payload.product_id,
        )
        .order_by(InventoryBatch.created_at, InventoryBatch.id)
        .limit(1)
    )

    if existing:
        existing.quantity += payload.quantity
        if payload.location:
            existing.location = payload.location
        if payload.min_stock_level:
            existing.min_stock_level = payload.min_stock_level
        if payload.max_stock_level:
            existing.max_stock_level = payload.max_stock_level
        if payload.expiry_date:
            existing.expiry_date = payload.expiry_date
        existing.version += 1
        batch = existing
    else:
        batch = InventoryBatch(
            id=new_id("inv"),
            merchant_id=merchant_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            location=payload.location,
            min_stock_level=payload.min_stock_level,
            max_stock_level=payload.max_stock_level,
            expiry_date=payload.expiry_date,
            version=1,
        )
        db.add(batch)

    _sync_expiry_status(batch)
    await db.flush()

    await emit_activity(
        db,
        user_id=actor.id,
        username=actor.email,
        code=ActivityCode.ADD_INVENTORY,
        **actor_context(actor),
        quantity=payload.quantity,
        product_id=payload.product_id,
        target_name=batch.id,
    )

    await db.commit()
    await db.refresh(batch)

    logger.info(
        "Inventory added",
        extra={"batch_id": batch.id, "merchant_id": merchant_id, "quantity": payload.quantity},
    )
    return _map_batch(batch)


# =====================================================
# DELETE (DELETE /api/inventory/{batch_id})
# =====================================================
async def delete_batch(db: AsyncSession, batch_id: str, actor) -> None:
    if actor is None:
        raise ValidationError("Sign in to delete inventory", ErrorCode.UNAUTHENTICATED)

    batch = await db.get(InventoryBatch, batch_id)
    if not batch or (not actor.is_admin and batch.merchant_id != actor.id):
        raise BatchNotFoundError(batch_id)

    product_id = batch.product_id
    await db.delete(batch)

    await emit_activity(
        db,
        user_id=actor.id,
        username=actor.email,
        code=ActivityCode.DELETE_INVENTORY,
        **actor_context(actor),
        target_name=batch_id,
        product_id=product_id,
    )

    await db.commit()
    logger.info("Batch deleted", extra={"batch_id": batch_id, "product_id": product_id})
