from datetime import date, timedelta

from warehouse.constants.activity_codes import ActivityCode
from warehouse.core.config import EXPIRY_WARNING_DAYS
from warehouse.repositories.base import WarehouseStore
from warehouse.services.inventory.inventory_status_service import EXPIRED, ABOUT_TO_EXPIRE, NORMAL
from warehouse.utils.dates import parse_iso_date
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


def compute_expiry_status(expiry_date, today: date, warning_days: int = EXPIRY_WARNING_DAYS) -> str | None:
    """None when the batch has no usable expiry date."""
    expires_on = parse_iso_date(expiry_date)
    if expires_on is None:
        return None
    if expires_on < today:
        return EXPIRED
    if expires_on <= today + timedelta(days=warning_days):
        return ABOUT_TO_EXPIRE
    return NORMAL


async def refresh_expiry_statuses(
    store: WarehouseStore,
    today: date | None = None,
    warning_days: int = EXPIRY_WARNING_DAYS,
) -> int:
    today = today or date.today()
    changed = 0

    for batch in await store.batches.list():
        status = compute_expiry_status(batch.expiry_date, today, warning_days)
        # A cleared expiry date clears the status too.
        if status == batch.expiry_status:
            continue
        await store.batches.save(batch.model_copy(update={"expiry_status": status}))
        changed += 1

    if not changed:
        return 0

    await store.activity.emit(
        user_id=None,
        username="system",
        code=ActivityCode.REFRESH_EXPIRY,
        actor_role="System",
        actor_email="system",
        changed=changed,
    )
    await store.commit()

    logger.info("Expiry statuses refreshed", extra={"changed": changed, "today": today.isoformat()})
    return changed
