# warehouse/services/orders/order_service.py

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.models.orders.order_models import Order
from warehouse.schemas.orders.order_schemas import OrderCreate, OrderOut
from warehouse.core.exceptions import AppException, ValidationError
from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.activity_codes import ActivityCode
from warehouse.utils.activity_helpers import emit_activity
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


async def create_order(db: AsyncSession, payload: OrderCreate) -> OrderOut:
    if not payload.id:
        raise ValidationError("Order id is required", ErrorCode.ORDER_ID_REQUIRED)

    if await db.get(Order, payload.id):
        raise AppException(409, "Order with this id already exists", ErrorCode.ORDER_EXISTS)

    order = Order(
        **payload.model_dump(exclude={"items"}),
        items=[item.model_dump(by_alias=True, exclude_none=True) for item in payload.items],
    )
    db.add(order)

    await emit_activity(
        db,
        user_id=payload.merchant_id,
        username=payload.merchant_id or "storefront",
        code=ActivityCode.CREATE_ORDER,
        target_name=payload.id,
        merchant_id=payload.merchant_id or "-",
    )

    await db.commit()
    await db.refresh(order)

    logger.info("Order stored", extra={"order_id": order.id, "merchant_id": order.merchant_id})
    return OrderOut.model_validate(order)


async def list_orders(db: AsyncSession) -> list[OrderOut]:
    result = await db.execute(select(Order).order_by(desc(Order.date), desc(Order.id)))
    return [OrderOut.model_validate(o) for o in result.scalars().all()]
