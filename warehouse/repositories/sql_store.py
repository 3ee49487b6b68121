# warehouse/repositories/sql_store.py

from typing import Iterable, Optional

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.models.inventory.inventory_batch_models import InventoryBatch
from warehouse.models.inventory.inventory_transaction_models import InventoryTransaction
from warehouse.models.inventory.inventory_request_models import InventoryRequest, InventoryRequestItem
from warehouse.models.inventory.merchant_location_models import MerchantLocation
from warehouse.models.masters.product_models import Product
from warehouse.constants.activity_codes import ActivityCode
from warehouse.models.enums.inventory_request_status import RequestStatus
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut, TransactionOut
from warehouse.schemas.inventory.inventory_request_schemas import InventoryRequestOut, RequestItemOut
from warehouse.schemas.inventory.location_schemas import LocationOut, LocationSnapshot
from warehouse.schemas.masters.product_schemas import ProductOut
from warehouse.services.inventory.inventory_batch_service import _map_batch
from warehouse.utils.activity_helpers import emit_activity


# =====================================================
# MAPPERS
# =====================================================
def _map_transaction(txn: InventoryTransaction) -> TransactionOut:
    return TransactionOut.model_validate(txn)


def _map_location(loc: MerchantLocation) -> LocationOut:
    return LocationOut.model_validate(loc)


def _map_product(product: Product) -> ProductOut:
    return ProductOut.model_validate(product)


def _snapshot(value: Optional[dict]) -> Optional[LocationSnapshot]:
    return LocationSnapshot(**value) if value else None


def _map_request(req: InventoryRequest) -> InventoryRequestOut:
    return InventoryRequestOut(
        id=req.id,
        merchant_id=req.merchant_id,
        type=req.type,
        items=[RequestItemOut(product_id=i.product_id, quantity=i.quantity) for i in req.items],
        total_weight_kg=req.total_weight_kg,
        fee=req.fee,
        pickup_location=_snapshot(req.pickup_location),
        delivery_location=_snapshot(req.delivery_location),
        status=req.status,
        date=req.date,
    )


# =====================================================
# REPOSITORIES
# =====================================================
class SqlBatchRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, batch_id: str) -> Optional[BatchOut]:
        batch = await self.db.get(InventoryBatch, batch_id)
        return _map_batch(batch) if batch else None

    async def list(self, merchant_id: Optional[str] = None) -> list[BatchOut]:
        stmt = select(InventoryBatch).order_by(InventoryBatch.created_at, InventoryBatch.id)
        if merchant_id:
            stmt = stmt.where(InventoryBatch.merchant_id == merchant_id)
        result = await self.db.execute(stmt)
        return [_map_batch(b) for b in result.scalars().all()]

    async def find_for_product(self, merchant_id: str, product_id: str) -> Optional[BatchOut]:
        batch = await self.db.scalar(
            select(InventoryBatch)
            .where(
                InventoryBatch.merchant_id == merchant_id,
                InventoryBatch.product_id == product_id,
            )
            .order_by(InventoryBatch.created_at, InventoryBatch.id)
            .limit(1)
        )
        return _map_batch(batch) if batch else None

    async def save(self, batch: BatchOut) -> BatchOut:
        row = await self.db.get(InventoryBatch, batch.id)
        values = batch.model_dump(exclude={"id", "version"})
        if row is None:
            row = InventoryBatch(id=batch.id, version=1, **values)
            self.db.add(row)
        else:
            for field, value in values.items():
                setattr(row, field, value)
            row.version += 1
        await self.db.flush()
        return _map_batch(row)


class SqlTransactionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, txn: TransactionOut) -> TransactionOut:
        row = InventoryTransaction(**txn.model_dump())
        self.db.add(row)
        await self.db.flush()
        return txn

    async def list(self, merchant_id: Optional[str] = None) -> list[TransactionOut]:
        stmt = select(InventoryTransaction).order_by(InventoryTransaction.created_at, InventoryTransaction.id)
        if merchant_id:
            stmt = stmt.where(InventoryTransaction.merchant_id == merchant_id)
        result = await self.db.execute(stmt)
        return [_map_transaction(t) for t in result.scalars().all()]


class SqlRequestRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, request: InventoryRequestOut) -> InventoryRequestOut:
        row = InventoryRequest(
            id=request.id,
            merchant_id=request.merchant_id,
            type=request.type,
            status=request.status,
            total_weight_kg=request.total_weight_kg,
            fee=request.fee,
            pickup_location=request.pickup_location.model_dump() if request.pickup_location else None,
            delivery_location=request.delivery_location.model_dump() if request.delivery_location else None,
            date=request.date,
            items=[
                InventoryRequestItem(position=i, product_id=item.product_id, quantity=item.quantity)
                for i, item in enumerate(request.items)
            ],
        )
        self.db.add(row)
        await self.db.flush()
        return request

    async def get(self, request_id: str) -> Optional[InventoryRequestOut]:
        row = await self.db.get(InventoryRequest, request_id)
        return _map_request(row) if row else None

    async def list(self, merchant_id: Optional[str] = None) -> list[InventoryRequestOut]:
        stmt = select(InventoryRequest).order_by(desc(InventoryRequest.date), desc(InventoryRequest.id))
        if merchant_id:
            stmt = stmt.where(InventoryRequest.merchant_id == merchant_id)
        result = await self.db.execute(stmt)
        return [_map_request(r) for r in result.scalars().all()]

    async def set_status(self, request_id: str, status: RequestStatus) -> Optional[InventoryRequestOut]:
        row = await self.db.get(InventoryRequest, request_id)
        if row is None:
            return None
        row.status = status
        await self.db.flush()
        return _map_request(row)


class SqlLocationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, location: LocationOut) -> LocationOut:
        self.db.add(MerchantLocation(**location.model_dump()))
        await self.db.flush()
        return location

    async def get(self, location_id: str) -> Optional[LocationOut]:
        row = await self.db.get(MerchantLocation, location_id)
        return _map_location(row) if row else None

    async def list_all(self) -> list[LocationOut]:
        result = await self.db.execute(
            select(MerchantLocation).order_by(MerchantLocation.created_at, MerchantLocation.id)
        )
        return [_map_location(r) for r in result.scalars().all()]

    async def update(self, location: LocationOut) -> LocationOut:
        row = await self.db.get(MerchantLocation, location.id)
        for field, value in location.model_dump(exclude={"id"}).items():
            setattr(row, field, value)
        await self.db.flush()
        return location

    async def delete(self, location_id: str) -> None:
        row = await self.db.get(MerchantLocation, location_id)
        if row is not None:
            await self.db.delete(row)
            await self.db.flush()


class SqlProductRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, product_id: str) -> Optional[ProductOut]:
        row = await self.db.get(Product, product_id)
        return _map_product(row) if row else None

    async def get_many(self, product_ids: Iterable[str]) -> dict[str, ProductOut]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        result = await self.db.execute(select(Product).where(Product.id.in_(ids)))
        return {p.id: _map_product(p) for p in result.scalars().all()}

    async def add(self, product: ProductOut) -> ProductOut:
        self.db.add(Product(version=1, **product.model_dump()))
        await self.db.flush()
        return product

    async def list(self, merchant_id: Optional[str] = None) -> list[ProductOut]:
        stmt = select(Product).order_by(Product.created_at, Product.id)
        if merchant_id:
            stmt = stmt.where(Product.merchant_id == merchant_id)
        result = await self.db.execute(stmt)
        return [_map_product(p) for p in result.scalars().all()]


class SqlActivitySink:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def emit(self, *, user_id: Optional[str], username: str, code: ActivityCode, **context) -> None:
        await emit_activity(self.db, user_id=user_id, username=username, code=code, **context)


# =====================================================
# STORE
# =====================================================
class SqlWarehouseStore:
    """All merchant-data repositories sharing one session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.batches = SqlBatchRepository(db)
        self.transactions = SqlTransactionRepository(db)
        self.requests = SqlRequestRepository(db)
        self.locations = SqlLocationRepository(db)
        self.products = SqlProductRepository(db)
        self.activity = SqlActivitySink(db)

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
