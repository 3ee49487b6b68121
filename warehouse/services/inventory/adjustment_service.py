# warehouse/services/inventory/adjustment_service.py
"""Quantity adjustment engine.

A typed reason decides the sign of the entered quantity; the resulting delta
is applied to a batch and recorded as one immutable transaction.
"""

import re
from datetime import date, datetime, timezone

from warehouse.constants.inventory_movement_type import (
    AdjustmentReason,
    SignPolicy,
    REASON_SIGN_POLICY,
    TransactionType,
)
from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.activity_codes import ActivityCode
from warehouse.core.exceptions import BatchNotFoundError, ValidationError
from warehouse.repositories.base import WarehouseStore, InventoryGateway
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut, TransactionOut
from warehouse.services.inventory.inventory_sync import push_batch_update
from warehouse.utils.activity_helpers import actor_context
from warehouse.utils.ids import new_id
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)

INTEGER_TEXT = re.compile(r"[+-]?\d+", re.ASCII)


# =====================================================
# PURE HELPERS
# =====================================================
def parse_quantity(raw) -> int:
    if isinstance(raw, bool):
        raise ValidationError("Quantity must be a whole number", ErrorCode.INVALID_INPUT)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if INTEGER_TEXT.fullmatch(text):
            return int(text)
    raise ValidationError(
        "Quantity must be a whole number",
        ErrorCode.INVALID_INPUT,
        details={"quantity": raw if isinstance(raw, (str, int, float)) else repr(raw)},
    )


def effective_delta(raw_quantity, reason: AdjustmentReason) -> int:
    quantity = parse_quantity(raw_quantity)
    policy = REASON_SIGN_POLICY[AdjustmentReason(reason)]

    if policy is SignPolicy.DEDUCT:
        return -abs(quantity)
    if policy is SignPolicy.ADD:
        return abs(quantity)
    return quantity


def apply_adjustment(
    batch: BatchOut,
    raw_quantity,
    reason: AdjustmentReason,
    notes: str | None = None,
) -> tuple[BatchOut, TransactionOut]:
    reason = AdjustmentReason(reason)
    delta = effective_delta(raw_quantity, reason)
    notes = notes or reason.label

    updated = batch.model_copy(
        update={
            "quantity": batch.quantity + delta,
            "last_adjustment": {
                "type": reason.value,
                "quantity": delta,
                "date": datetime.now(timezone.utc).isoformat(),
                "notes": notes,
            },
        }
    )

    txn = TransactionOut(
        id=new_id("txn"),
        merchant_id=batch.merchant_id,
        product_id=batch.product_id,
        batch_id=batch.id,
        type=TransactionType(reason.value),
        quantity=delta,
        date=date.today(),
        notes=notes,
    )
    return updated, txn


# =====================================================
# ORCHESTRATION
# =====================================================
async def adjust_stock(
    store: WarehouseStore,
    gateway: InventoryGateway,
    batch_id: str,
    raw_quantity,
    reason: AdjustmentReason,
    notes: str | None = None,
    actor=None,
) -> tuple[BatchOut, TransactionOut]:
    batch = await store.batches.get(batch_id)
    if not batch:
        raise BatchNotFoundError(batch_id)

    if actor is not None and not actor.is_admin and batch.merchant_id != actor.id:
        raise BatchNotFoundError(batch_id)

    updated, txn = apply_adjustment(batch, raw_quantity, reason, notes)

    await push_batch_update(
        gateway,
        batch,
        {"quantity": updated.quantity, "last_adjustment": updated.last_adjustment},
    )

    # No rollback: the batch is already changed when the log write happens.
    try:
        await store.transactions.append(txn)
        if actor is not None:
            await store.activity.emit(
                user_id=actor.id,
                username=actor.email,
                code=ActivityCode.ADJUST_STOCK,
                **actor_context(actor),
                target_name=batch.id,
                quantity_change=f"{txn.quantity:+d}",
                reason=txn.type.value,
                new_quantity=updated.quantity,
            )
        await store.commit()
    except Exception:
        logger.exception(
            "Stock adjusted but transaction log write failed",
            extra={"batch_id": batch.id, "delta": txn.quantity},
        )
        raise

    logger.info(
        "Stock adjusted",
        extra={
            "batch_id": batch.id,
            "reason": txn.type.value,
            "delta": txn.quantity,
            "new_quantity": updated.quantity,
        },
    )
    return updated, txn
