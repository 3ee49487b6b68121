# warehouse/schemas/inventory/inventory_request_schemas.py

from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal
from datetime import date as Date

from warehouse.models.enums.inventory_request_type import RequestType
from warehouse.models.enums.inventory_request_status import RequestStatus
from warehouse.schemas.inventory.location_schemas import LocationSnapshot


class RequestItemIn(BaseModel):
    product_id: Optional[str] = None
    quantity: Optional[int] = None


class InventoryRequestCreate(BaseModel):
    type: RequestType
    items: List[RequestItemIn] = []
    location_id: Optional[str] = None
    location: Optional[LocationSnapshot] = None
    merchant_id: Optional[str] = None


class RequestItemOut(BaseModel):
    product_id: str
    quantity: int

    class Config:
        from_attributes = True


class InventoryRequestOut(BaseModel):
    id: str
    merchant_id: str
    type: RequestType
    items: List[RequestItemOut]
    total_weight_kg: Decimal
    fee: int
    pickup_location: Optional[LocationSnapshot] = None
    delivery_location: Optional[LocationSnapshot] = None
    status: RequestStatus = RequestStatus.pending
    date: Date

    class Config:
        from_attributes = True


class InventoryRequestListData(BaseModel):
    total: int
    items: List[InventoryRequestOut]
