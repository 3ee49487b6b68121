# warehouse/routers/inventory/inventory_batch_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.core.dependencies import get_store, get_inventory_gateway
from warehouse.core.exceptions import ValidationError
from warehouse.constants.error_codes import ErrorCode
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.schemas.inventory.inventory_batch_schemas import (
    BatchOut,
    BatchUpdate,
    BatchCreate,
    InventoryAddRequest,
    AdjustStockRequest,
    AdjustmentResult,
    InventoryOverview,
    TransactionOut,
)
from warehouse.services.inventory.inventory_batch_service import (
    update_batch,
    create_batch,
    add_inventory_item,
    delete_batch,
)
from warehouse.services.inventory.adjustment_service import adjust_stock
from warehouse.services.inventory.inventory_status_service import build_inventory_overview
from warehouse.utils.get_user import get_current_actor
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])
logger = get_logger(__name__)


def _require_actor(actor: Actor | None) -> Actor:
    if actor is None:
        raise ValidationError("Sign in to view inventory", ErrorCode.UNAUTHENTICATED)
    return actor


@router.get("", response_model=APIResponse[InventoryOverview])
async def list_inventory_api(
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    actor = _require_actor(actor)
    batches = await store.batches.list(merchant_id=actor.merchant_id)
    products = await store.products.get_many(b.product_id for b in batches)
    overview = build_inventory_overview(batches, {pid: p.name for pid, p in products.items()})
    return success_response("Inventory fetched successfully", overview)


@router.post("", response_model=APIResponse[BatchOut], status_code=status.HTTP_201_CREATED)
async def add_inventory_api(
    payload: InventoryAddRequest,
    db: AsyncSession = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    logger.info("Add inventory", extra={"product_id": payload.product_id})
    batch = await add_inventory_item(db, payload, actor)
    return success_response("Inventory added successfully", batch)


@router.get("/transactions", response_model=APIResponse[list[TransactionOut]])
async def list_transactions_api(
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    actor = _require_actor(actor)
    txns = await store.transactions.list(merchant_id=actor.merchant_id)
    return success_response("Transactions fetched successfully", txns)


# =====================================================
# MUTATION ENDPOINT (consumed by the inventory gateway)
# =====================================================
@router.patch("/{batch_id}", response_model=APIResponse[BatchOut])
async def update_batch_api(
    batch_id: str,
    payload: BatchUpdate,
    db: AsyncSession = Depends(get_db),
):
    batch = await update_batch(db, batch_id, payload)
    return success_response("Inventory batch updated", batch)


@router.post("/{batch_id}", response_model=APIResponse[BatchOut], status_code=status.HTTP_201_CREATED)
async def create_batch_api(
    batch_id: str,
    payload: BatchCreate,
    db: AsyncSession = Depends(get_db),
):
    batch = await create_batch(db, batch_id, payload)
    return success_response("Inventory batch created", batch)


@router.delete("/{batch_id}")
async def delete_batch_api(
    batch_id: str,
    db: AsyncSession = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    await delete_batch(db, batch_id, actor)
    return success_response("Inventory batch deleted")


# =====================================================
# STOCK ADJUSTMENT
# =====================================================
@router.post("/{batch_id}/adjust", response_model=APIResponse[AdjustmentResult])
async def adjust_stock_api(
    batch_id: str,
    payload: AdjustStockRequest,
    store=Depends(get_store),
    gateway=Depends(get_inventory_gateway),
    actor: Actor | None = Depends(get_current_actor),
):
    logger.info("Adjust stock", extra={"batch_id": batch_id, "reason": payload.reason.value})
    batch, txn = await adjust_stock(
        store,
        gateway,
        batch_id,
        payload.quantity,
        payload.reason,
        payload.notes,
        actor,
    )
    return success_response(
        "Stock adjusted successfully",
        AdjustmentResult(batch=batch, transaction=txn),
    )
