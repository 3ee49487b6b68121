from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.orders.order_schemas import OrderCreate, OrderOut
from warehouse.services.orders.order_service import create_order, list_orders
from warehouse.utils.response import APIResponse, success_response

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=APIResponse[OrderOut], status_code=status.HTTP_201_CREATED)
async def create_order_api(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
):
    order = await create_order(db, payload)
    return success_response("Order stored successfully", order)


@router.get("", response_model=APIResponse[list[OrderOut]])
async def list_orders_api(db: AsyncSession = Depends(get_db)):
    orders = await list_orders(db)
    return success_response("Orders fetched successfully", orders)
