# warehouse/services/inventory/inventory_request_service.py
"""Inbound/outbound request builder.

Outbound submissions decrement stock line by line before the request is
recorded. Fulfillment is not transactional: if line k fails, lines before it
stay applied and no request is created. Completing an inbound request and
cancelling an outbound one credit stock back the same way.
"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.fees import FEE_BLOCK_KG, FEE_PER_BLOCK, MIN_BILLABLE_WEIGHT_KG
from warehouse.constants.inventory_movement_type import TransactionType
from warehouse.core.exceptions import AppException, InsufficientInventoryError, ValidationError
from warehouse.models.enums.inventory_request_status import RequestStatus
from warehouse.models.enums.inventory_request_type import RequestType
from warehouse.repositories.base import WarehouseStore, InventoryGateway
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut, TransactionOut
from warehouse.schemas.inventory.inventory_request_schemas import (
    InventoryRequestOut,
    RequestItemIn,
    RequestItemOut,
)
from warehouse.schemas.inventory.location_schemas import LocationSnapshot
from warehouse.schemas.masters.product_schemas import ProductOut
from warehouse.services.inventory.inventory_sync import push_batch_update
from warehouse.utils.activity_helpers import actor_context
from warehouse.utils.decimal_utils import to_decimal, round_weight
from warehouse.utils.ids import new_id
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_RECEIVING_LOCATION = "Default Warehouse"


# =====================================================
# FEES
# =====================================================
def compute_total_weight(items: Iterable[RequestItemOut], products: dict[str, ProductOut]) -> Decimal:
    total = Decimal("0")
    for item in items:
        product = products.get(item.product_id)
        weight = to_decimal(product.weight_kg if product else None)
        total += weight * item.quantity
    return round_weight(total)


def compute_fee(total_weight_kg) -> int:
    """150 per started 10 kg block, with a 1 kg minimum."""
    billable = max(MIN_BILLABLE_WEIGHT_KG, to_decimal(total_weight_kg))
    blocks = math.ceil(billable / FEE_BLOCK_KG)
    return int(blocks) * FEE_PER_BLOCK


# =====================================================
# VALIDATION
# =====================================================
def _validate_items(items: list[RequestItemIn]) -> list[RequestItemOut]:
    if not items:
        raise ValidationError("Add at least one item", ErrorCode.INVALID_ITEM)

    valid = []
    for index, item in enumerate(items):
        quantity = item.quantity
        if (
            not item.product_id
            or isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or quantity <= 0
        ):
            raise ValidationError(
                "Every item needs a product and a quantity above zero",
                ErrorCode.INVALID_ITEM,
                details={"index": index},
            )
        valid.append(RequestItemOut(product_id=item.product_id, quantity=quantity))
    return valid


def _requested_per_product(items: list[RequestItemOut]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for item in items:
        totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
    return totals


async def _check_availability(
    store: WarehouseStore,
    merchant_id: str,
    items: list[RequestItemOut],
) -> dict[str, BatchOut]:
    """Source batch per product. Raises before anything is mutated."""
    sources: dict[str, BatchOut] = {}
    for product_id, requested in _requested_per_product(items).items():
        batch = await store.batches.find_for_product(merchant_id, product_id)
        available = batch.quantity if batch else 0
        if batch is None or available < requested:
            raise InsufficientInventoryError(
                f"Not enough stock for product {product_id}: requested {requested}, available {available}",
                details={
                    "product_id": product_id,
                    "requested": requested,
                    "available": available,
                },
            )
        sources[product_id] = batch
    return sources


# =====================================================
# LINE-BY-LINE STOCK CHANGES
# =====================================================
def _stopped_part_way(
    exc: Exception,
    request_id: str,
    product_id: str,
    applied: list[dict],
) -> AppException:
    """Attach the already-applied lines to the error that interrupted a multi-line stock change."""
    logger.warning(
        "Stock change stopped part way, earlier lines stay applied",
        extra={
            "request_id": request_id,
            "failed_product_id": product_id,
            "applied_items": applied,
            "error": str(exc),
        },
    )
    if isinstance(exc, AppException):
        exc.details = {**(exc.details or {}), "applied_items": applied}
        return exc
    return AppException(
        500,
        f"Request {request_id} stopped at product {product_id}; earlier lines stay applied",
        ErrorCode.PARTIAL_FULFILLMENT,
        details={"failed_product_id": product_id, "applied_items": applied},
    )


def _last_adjustment(txn_type: TransactionType, quantity: int, notes: str) -> dict:
    return {
        "type": txn_type.value,
        "quantity": quantity,
        "date": datetime.now(timezone.utc).isoformat(),
        "notes": notes,
    }


async def _append_movement(
    store: WarehouseStore,
    batch: BatchOut,
    txn_type: TransactionType,
    quantity: int,
    notes: str,
) -> None:
    await store.transactions.append(
        TransactionOut(
            id=new_id("txn"),
            merchant_id=batch.merchant_id,
            product_id=batch.product_id,
            batch_id=batch.id,
            type=txn_type,
            quantity=quantity,
            date=date.today(),
            notes=notes,
        )
    )
    await store.commit()


async def _fulfill_outbound(
    store: WarehouseStore,
    gateway: InventoryGateway,
    items: list[RequestItemOut],
    sources: dict[str, BatchOut],
    request_id: str,
) -> None:
    running = dict(sources)
    applied: list[dict] = []
    notes = f"Outbound request {request_id}"

    for item in items:
        batch = running[item.product_id]
        delta = -abs(item.quantity)
        updates = {
            "quantity": batch.quantity + delta,
            "last_adjustment": _last_adjustment(TransactionType.OUTBOUND, delta, notes),
        }

        try:
            await push_batch_update(gateway, batch, updates)
            running[item.product_id] = batch.model_copy(update=updates)
            applied.append({"product_id": item.product_id, "batch_id": batch.id, "quantity": item.quantity})
            await _append_movement(store, batch, TransactionType.OUTBOUND, delta, notes)
        except Exception as exc:
            error = _stopped_part_way(exc, request_id, item.product_id, applied)
            if error is exc:
                raise
            raise error from exc


async def _credit_stock(
    store: WarehouseStore,
    gateway: InventoryGateway,
    request: InventoryRequestOut,
    txn_type: TransactionType,
    notes: str,
) -> None:
    """Add every line back into the merchant's first batch for the product, creating it if needed."""
    running: dict[str, BatchOut] = {}
    applied: list[dict] = []

    for item in request.items:
        quantity = abs(item.quantity)
        try:
            batch = running.get(item.product_id) or await store.batches.find_for_product(
                request.merchant_id, item.product_id
            )
            adjustment = _last_adjustment(txn_type, quantity, notes)
            if batch is None:
                batch = await gateway.create_batch(
                    BatchOut(
                        id=new_id("inv"),
                        product_id=item.product_id,
                        merchant_id=request.merchant_id,
                        quantity=quantity,
                        location=DEFAULT_RECEIVING_LOCATION,
                        last_adjustment=adjustment,
                    )
                )
            else:
                updates = {"quantity": batch.quantity + quantity, "last_adjustment": adjustment}
                await push_batch_update(gateway, batch, updates)
                batch = batch.model_copy(update=updates)

            running[item.product_id] = batch
            applied.append({"product_id": item.product_id, "batch_id": batch.id, "quantity": quantity})
            await _append_movement(store, batch, txn_type, quantity, notes)
        except Exception as exc:
            error = _stopped_part_way(exc, request.id, item.product_id, applied)
            if error is exc:
                raise
            raise error from exc


# =====================================================
# SUBMIT
# =====================================================
async def submit_request(
    store: WarehouseStore,
    gateway: InventoryGateway,
    *,
    request_type: RequestType,
    items: list[RequestItemIn],
    location: LocationSnapshot | None,
    merchant_id: str | None,
    actor=None,
) -> InventoryRequestOut:
    request_type = RequestType(request_type)

    if not merchant_id:
        raise ValidationError("Sign in as a merchant to submit requests", ErrorCode.UNAUTHENTICATED)

    if location is None:
        label = "pickup" if request_type == RequestType.inbound else "delivery"
        raise ValidationError(f"Select a {label} location", ErrorCode.MISSING_LOCATION)

    valid_items = _validate_items(items)

    request_id = new_id("req")

    if request_type == RequestType.outbound:
        sources = await _check_availability(store, merchant_id, valid_items)
        await _fulfill_outbound(store, gateway, valid_items, sources, request_id)

    products = await store.products.get_many(i.product_id for i in valid_items)
    total_weight = compute_total_weight(valid_items, products)

    request = InventoryRequestOut(
        id=request_id,
        merchant_id=merchant_id,
        type=request_type,
        items=valid_items,
        total_weight_kg=total_weight,
        fee=compute_fee(total_weight),
        pickup_location=location if request_type == RequestType.inbound else None,
        delivery_location=location if request_type == RequestType.outbound else None,
        status=RequestStatus.pending,
        date=date.today(),
    )

    await store.requests.add(request)

    if actor is not None:
        code = ActivityCode.SUBMIT_INBOUND if request_type == RequestType.inbound else ActivityCode.SUBMIT_OUTBOUND
        await store.activity.emit(
            user_id=actor.id,
            username=actor.email,
            code=code,
            **actor_context(actor),
            target_name=request.id,
            total_weight_kg=request.total_weight_kg,
            fee=request.fee,
        )

    await store.commit()

    logger.info(
        "Inventory request submitted",
        extra={
            "request_id": request.id,
            "request_type": request_type.value,
            "merchant_id": merchant_id,
            "fee": request.fee,
        },
    )
    return request


# =====================================================
# LIST
# =====================================================
async def list_requests(store: WarehouseStore, viewer) -> list[InventoryRequestOut]:
    """Merchants see their own requests, admins everything. Newest first."""
    if viewer is None:
        raise ValidationError("Sign in to view requests", ErrorCode.UNAUTHENTICATED)

    merchant_id = None if viewer.is_admin else viewer.id
    requests = await store.requests.list(merchant_id=merchant_id)
    return sorted(requests, key=lambda r: (r.date, r.id), reverse=True)


async def get_request(store: WarehouseStore, request_id: str, viewer) -> InventoryRequestOut:
    request = await store.requests.get(request_id)
    if not request or (viewer is not None and not viewer.is_admin and request.merchant_id != viewer.id):
        raise AppException(404, "Inventory request not found", ErrorCode.REQUEST_NOT_FOUND)
    return request


# =====================================================
# STATUS TRANSITIONS (pending -> completed | cancelled)
# =====================================================
def _require_pending(request: InventoryRequestOut) -> None:
    if request.status != RequestStatus.pending:
        raise AppException(
            409,
            f"Request {request.id} is already {request.status.value}",
            ErrorCode.REQUEST_NOT_PENDING,
            details={"status": request.status.value},
        )


async def _finish(
    store: WarehouseStore,
    request: InventoryRequestOut,
    status: RequestStatus,
    code: ActivityCode,
    actor,
) -> InventoryRequestOut:
    updated = await store.requests.set_status(request.id, status)
    await store.activity.emit(
        user_id=actor.id,
        username=actor.email,
        code=code,
        **actor_context(actor),
        target_name=request.id,
        request_type=request.type.value,
        fee=request.fee,
    )
    await store.commit()

    logger.info(
        "Inventory request closed",
        extra={"request_id": request.id, "status": status.value, "request_type": request.type.value},
    )
    return updated


async def complete_request(
    store: WarehouseStore,
    gateway: InventoryGateway,
    request_id: str,
    actor,
) -> InventoryRequestOut:
    """Admin receipt of a request.

    Inbound lines are credited to stock. Outbound stock already left at
    submission, so only the fee is booked for it.
    """
    if actor is None:
        raise ValidationError("Sign in to complete requests", ErrorCode.UNAUTHENTICATED)
    if not actor.is_admin:
        raise AppException(403, "Only admins can complete requests", ErrorCode.PERMISSION_DENIED)

    request = await get_request(store, request_id, actor)
    _require_pending(request)

    inbound = request.type == RequestType.inbound
    if inbound:
        await _credit_stock(store, gateway, request, TransactionType.INBOUND, f"Inbound request {request.id} received")

    label = "Inbound" if inbound else "Outbound"
    await store.transactions.append(
        TransactionOut(
            id=new_id("txn"),
            merchant_id=request.merchant_id,
            type=TransactionType.INBOUND_FEE if inbound else TransactionType.OUTBOUND_FEE,
            quantity=1,
            amount=request.fee,
            date=date.today(),
            notes=f"{label} fee for shipment {request.id}",
        )
    )
    return await _finish(store, request, RequestStatus.completed, ActivityCode.COMPLETE_REQUEST, actor)


async def cancel_request(
    store: WarehouseStore,
    gateway: InventoryGateway,
    request_id: str,
    actor,
) -> InventoryRequestOut:
    """Owner or admin cancellation. A cancelled outbound puts its stock back."""
    if actor is None:
        raise ValidationError("Sign in to cancel requests", ErrorCode.UNAUTHENTICATED)

    request = await get_request(store, request_id, actor)
    _require_pending(request)

    if request.type == RequestType.outbound:
        await _credit_stock(store, gateway, request, TransactionType.RETURN, f"Outbound request {request.id} cancelled")

    return await _finish(store, request, RequestStatus.cancelled, ActivityCode.CANCEL_REQUEST, actor)
