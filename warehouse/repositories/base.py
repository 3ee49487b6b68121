# warehouse/repositories/base.py
"""Storage interfaces the inventory services are written against.

Services never touch a session directly; they receive a ``WarehouseStore``
(merchant data), a ``KeyValueStore`` (client state) and an
``InventoryGateway`` (batch mutations that may live behind HTTP).
"""

from typing import Protocol, Iterable, Optional, List, Tuple, Dict

from warehouse.constants.activity_codes import ActivityCode
from warehouse.models.enums.inventory_request_status import RequestStatus
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut, TransactionOut
from warehouse.schemas.inventory.inventory_request_schemas import InventoryRequestOut
from warehouse.schemas.inventory.location_schemas import LocationOut
from warehouse.schemas.masters.product_schemas import ProductOut


class BatchRepository(Protocol):
    async def get(self, batch_id: str) -> Optional[BatchOut]: ...

    async def list(self, merchant_id: Optional[str] = None) -> List[BatchOut]: ...

    async def find_for_product(self, merchant_id: str, product_id: str) -> Optional[BatchOut]:
        """First stored batch of the merchant for the product."""
        ...

    async def save(self, batch: BatchOut) -> BatchOut: ...


class TransactionRepository(Protocol):
    async def append(self, txn: TransactionOut) -> TransactionOut: ...

    async def list(self, merchant_id: Optional[str] = None) -> List[TransactionOut]: ...


class RequestRepository(Protocol):
    async def add(self, request: InventoryRequestOut) -> InventoryRequestOut: ...

    async def get(self, request_id: str) -> Optional[InventoryRequestOut]: ...

    async def list(self, merchant_id: Optional[str] = None) -> List[InventoryRequestOut]: ...

    async def set_status(self, request_id: str, status: RequestStatus) -> Optional[InventoryRequestOut]: ...


class LocationRepository(Protocol):
    async def add(self, location: LocationOut) -> LocationOut: ...

    async def get(self, location_id: str) -> Optional[LocationOut]: ...

    async def list_all(self) -> List[LocationOut]: ...

    async def update(self, location: LocationOut) -> LocationOut: ...

    async def delete(self, location_id: str) -> None: ...


class ProductRepository(Protocol):
    async def get(self, product_id: str) -> Optional[ProductOut]: ...

    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, ProductOut]: ...

    async def add(self, product: ProductOut) -> ProductOut: ...

    async def list(self, merchant_id: Optional[str] = None) -> List[ProductOut]: ...


class ActivitySink(Protocol):
    async def emit(self, *, user_id: Optional[str], username: str, code: ActivityCode, **context) -> None: ...


class WarehouseStore(Protocol):
    batches: BatchRepository
    transactions: TransactionRepository
    requests: RequestRepository
    locations: LocationRepository
    products: ProductRepository
    activity: ActivitySink

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class KeyValueStore(Protocol):
    """Raw string values keyed by name, exactly as the client wrote them."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def items(self) -> List[Tuple[str, str]]: ...


class InventoryGateway(Protocol):
    """Mutation calls against the inventory store.

    ``update_batch`` raises ``BatchNotFoundError`` when the id is unknown and
    ``RemoteFailureError`` for any other transport or server failure.
    """

    async def update_batch(self, batch_id: str, payload: dict) -> BatchOut: ...

    async def create_batch(self, batch: BatchOut) -> BatchOut: ...
