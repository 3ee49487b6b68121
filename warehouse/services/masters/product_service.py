# warehouse/services/masters/product_service.py

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from warehouse.models.inventory.inventory_batch_models import InventoryBatch
from warehouse.models.masters.product_models import Product
from warehouse.schemas.masters.product_schemas import ProductCreate, ProductUpdate, ProductOut, ProductListData
from warehouse.core.exceptions import AppException, ValidationError
from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.activity_codes import ActivityCode
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.ids import new_id
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


def _map_product(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        merchant_id=product.merchant_id,
        sku=product.sku,
        name=product.name,
        category=product.category,
        description=product.description,
        weight_kg=product.weight_kg,
    )


# ---------------- CREATE ----------------
async def create_product(db: AsyncSession, payload: ProductCreate, actor) -> ProductOut:
    if actor is None:
        raise ValidationError("Sign in to create products", ErrorCode.UNAUTHENTICATED)

    merchant_id = payload.merchant_id if (actor.is_admin and payload.merchant_id) else actor.id

    exists = await db.scalar(
        select(Product.id).where(
            Product.merchant_id == merchant_id,
            Product.sku == payload.sku,
        )
    )
    if exists:
        raise AppException(409, "SKU already exists", ErrorCode.PRODUCT_SKU_EXISTS)

    product = Product(
        id=new_id("prd"),
        merchant_id=merchant_id,
        **payload.model_dump(exclude={"merchant_id"}),
    )
    db.add(product)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        # Lost a race on the (merchant, sku) unique constraint.
        raise AppException(409, "SKU already exists", ErrorCode.PRODUCT_SKU_EXISTS)

    await emit_activity(
        db,
        user_id=actor.id,
        username=actor.email,
        code=ActivityCode.CREATE_PRODUCT,
        **actor_context(actor),
        target_name=payload.name,
        sku=payload.sku,
    )

    await db.commit()
    await db.refresh(product)

    logger.info("Product created", extra={"product_id": product.id, "sku": product.sku})
    return _map_product(product)


# ---------------- LIST ----------------
async def list_products(db: AsyncSession, merchant_id: str | None = None) -> ProductListData:
    filters = []
    if merchant_id:
        filters.append(Product.merchant_id == merchant_id)

    total = await db.scalar(select(func.count()).select_from(Product).where(*filters))
    result = await db.execute(
        select(Product).where(*filters).order_by(Product.created_at, Product.id)
    )
    return ProductListData(total=total or 0, items=[_map_product(p) for p in result.scalars().all()])


# ---------------- GET ----------------
async def get_product(db: AsyncSession, product_id: str) -> ProductOut:
    product = await db.get(Product, product_id)
    if not product:
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)
    return _map_product(product)


async def _get_owned_product(db: AsyncSession, product_id: str, actor) -> Product:
    if actor is None:
        raise ValidationError("Sign in to manage products", ErrorCode.UNAUTHENTICATED)

    product = await db.get(Product, product_id)
    if not product or (not actor.is_admin and product.merchant_id != actor.id):
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)
    return product


# ---------------- UPDATE ----------------
async def update_product(db: AsyncSession, product_id: str, payload: ProductUpdate, actor) -> ProductOut:
    product = await _get_owned_product(db, product_id, actor)
    changes = payload.model_dump(exclude_unset=True)

    new_sku = changes.get("sku")
    if new_sku and new_sku != product.sku:
        taken = await db.scalar(
            select(Product.id).where(
                Product.merchant_id == product.merchant_id,
                Product.sku == new_sku,
            )
        )
        if taken:
            raise AppException(409, "SKU already exists", ErrorCode.PRODUCT_SKU_EXISTS)

    for field, value in changes.items():
        setattr(product, field, value)
    product.version += 1

    await emit_activity(
        db,
        user_id=actor.id,
        username=actor.email,
        code=ActivityCode.UPDATE_PRODUCT,
        **actor_context(actor),
        target_name=product.name,
        changes=", ".join(sorted(changes)) or "nothing",
    )

    await db.commit()
    await db.refresh(product)

    logger.info("Product updated", extra={"product_id": product.id, "fields": sorted(changes)})
    return _map_product(product)


# ---------------- DELETE ----------------
async def delete_product(db: AsyncSession, product_id: str, actor) -> None:
    """Removes the product and the owner's batches of it. Transactions stay as history."""
    product = await _get_owned_product(db, product_id, actor)

    result = await db.execute(
        delete(InventoryBatch).where(
            InventoryBatch.merchant_id == product.merchant_id,
            InventoryBatch.product_id == product.id,
        )
    )
    await db.delete(product)

    await emit_activity(
        db,
        user_id=actor.id,
        username=actor.email,
        code=ActivityCode.DELETE_PRODUCT,
        **actor_context(actor),
        target_name=product.name,
        batch_count=result.rowcount,
    )

    await db.commit()

    logger.info("Product deleted", extra={"product_id": product_id, "batches_removed": result.rowcount})
