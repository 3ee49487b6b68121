# warehouse/routers/masters/product_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.schemas.masters.product_schemas import ProductCreate, ProductUpdate, ProductOut, ProductListData
from warehouse.services.masters.product_service import (
    create_product,
    list_products,
    get_product,
    update_product,
    delete_product,
)
from warehouse.utils.get_user import get_current_actor
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/api/products", tags=["Products"])
logger = get_logger(__name__)


@router.post("", response_model=APIResponse[ProductOut], status_code=status.HTTP_201_CREATED)
async def create_product_api(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    logger.info("Create product", extra={"sku": payload.sku})
    product = await create_product(db, payload, actor)
    return success_response("Product created successfully", product)


@router.get("", response_model=APIResponse[ProductListData])
async def list_products_api(
    db: AsyncSession = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    merchant_id = actor.merchant_id if actor else None
    data = await list_products(db, merchant_id)
    return success_response("Products fetched successfully", data)


@router.get("/{product_id}", response_model=APIResponse[ProductOut])
async def get_product_api(
    product_id: str,
    db: AsyncSession = Depends(get_db),
):
    product = await get_product(db, product_id)
    return success_response("Product fetched successfully", product)


@router.put("/{product_id}", response_model=APIResponse[ProductOut])
async def update_product_api(
    product_id: str,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    product = await update_product(db, product_id, payload, actor)
    return success_response("Product updated successfully", product)


@router.delete("/{product_id}")
async def delete_product_api(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    await delete_product(db, product_id, actor)
    return success_response("Product deleted successfully")
