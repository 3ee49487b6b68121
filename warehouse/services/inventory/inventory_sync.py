from warehouse.core.exceptions import BatchNotFoundError
from warehouse.repositories.base import InventoryGateway
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


async def push_batch_update(gateway: InventoryGateway, batch: BatchOut, updates: dict) -> BatchOut:
    """Send a partial update; if the store lost the batch, create it and retry once.

    The batch is created with ``updates`` already applied. A second
    ``BatchNotFoundError`` (or any other failure) propagates.
    """
    try:
        return await gateway.update_batch(batch.id, updates)
    except BatchNotFoundError:
        logger.warning(
            "Batch missing from inventory store, recreating",
            extra={"batch_id": batch.id, "product_id": batch.product_id},
        )

    await gateway.create_batch(batch.model_copy(update=updates))
    return await gateway.update_batch(batch.id, updates)
