# warehouse/services/inventory/inventory_status_service.py

from typing import Iterable

from warehouse.schemas.inventory.inventory_batch_schemas import (
    BatchOut,
    BatchStatus,
    BatchWithStatus,
    ProductGroup,
    ProductGroupOut,
    InventoryOverview,
)
from warehouse.utils.dates import parse_iso_date

EXPIRED = "expired"
ABOUT_TO_EXPIRE = "about_to_expire"
NORMAL = "normal"


def expiry_label(expiry_date) -> str:
    if not expiry_date:
        return "-"
    parsed = parse_iso_date(expiry_date)
    return parsed.isoformat() if parsed else str(expiry_date)


def classify(batch: BatchOut) -> BatchStatus:
    """Display status of one batch. Expiry outranks stock level.

    Thresholds of 0 mean "not configured" and never trigger.
    """
    min_level = batch.min_stock_level or 0
    max_level = batch.max_stock_level or 0

    is_low = min_level > 0 and batch.quantity <= min_level
    is_over = max_level > 0 and batch.quantity > max_level

    variant, text = "default", "OK"
    if is_low:
        variant, text = "destructive", "Low"
    elif is_over:
        variant, text = "warning", "Over"

    status = batch.expiry_status or NORMAL
    if status == EXPIRED:
        variant, text = "destructive", "Expired"
    elif status == ABOUT_TO_EXPIRE:
        variant, text = "warning", "Expiring Soon"

    return BatchStatus(
        is_low_stock=is_low,
        is_over_stock=is_over,
        expiry_label=expiry_label(batch.expiry_date),
        expiry_status=status,
        status_variant=variant,
        status_text=text,
    )


def group_by_product(batches: Iterable[BatchOut]) -> list[ProductGroup]:
    groups: dict[str, ProductGroup] = {}
    for batch in batches:
        group = groups.get(batch.product_id)
        if group is None:
            group = groups[batch.product_id] = ProductGroup(
                product_id=batch.product_id, batches=[], total_quantity=0
            )
        group.batches.append(batch)
        group.total_quantity += batch.quantity
    return list(groups.values())


def build_inventory_overview(batches: Iterable[BatchOut], product_names: dict[str, str] | None = None) -> InventoryOverview:
    product_names = product_names or {}
    items = [
        ProductGroupOut(
            product_id=group.product_id,
            product_name=product_names.get(group.product_id),
            total_quantity=group.total_quantity,
            batches=[BatchWithStatus(batch=b, status=classify(b)) for b in group.batches],
        )
        for group in group_by_product(batches)
    ]
    return InventoryOverview(total=len(items), items=items)
