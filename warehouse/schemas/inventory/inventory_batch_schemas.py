# warehouse/schemas/inventory/inventory_batch_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union
from datetime import date as Date

from warehouse.constants.inventory_movement_type import AdjustmentReason, TransactionType


class BatchOut(BaseModel):
    id: str
    product_id: str
    merchant_id: str
    quantity: int
    location: str = ""
    min_stock_level: int = 0
    max_stock_level: int = 0
    expiry_date: Optional[str] = None
    expiry_status: Optional[str] = None
    last_adjustment: Optional[dict] = None
    version: int = 1

    class Config:
        from_attributes = True


class BatchUpdate(BaseModel):
    """Partial update. Only fields present in the payload are written."""

    quantity: Optional[int] = None
    location: Optional[str] = None
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    max_stock_level: Optional[int] = Field(default=None, ge=0)
    expiry_date: Optional[str] = None
    expiry_status: Optional[str] = None
    last_adjustment: Optional[dict] = None


class BatchCreate(BaseModel):
    product_id: str
    merchant_id: str
    quantity: int = 0
    location: str = ""
    min_stock_level: int = Field(default=0, ge=0)
    max_stock_level: int = Field(default=0, ge=0)
    expiry_date: Optional[str] = None
    expiry_status: Optional[str] = None
    last_adjustment: Optional[dict] = None


class InventoryAddRequest(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    location: str = ""
    min_stock_level: int = Field(default=0, ge=0)
    max_stock_level: int = Field(default=0, ge=0)
    expiry_date: Optional[str] = None
    merchant_id: Optional[str] = None


class AdjustStockRequest(BaseModel):
    # Parsed by the adjustment engine so bad input maps to INVALID_INPUT.
    quantity: Union[int, str]
    reason: AdjustmentReason = AdjustmentReason.ADJUSTMENT
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    id: str
    merchant_id: str
    product_id: Optional[str] = None
    batch_id: Optional[str] = None
    type: TransactionType
    quantity: int
    amount: Optional[int] = None
    date: Date
    notes: str = ""

    class Config:
        from_attributes = True


class AdjustmentResult(BaseModel):
    batch: BatchOut
    transaction: TransactionOut


# ---------------- STATUS / OVERVIEW ----------------
class BatchStatus(BaseModel):
    is_low_stock: bool
    is_over_stock: bool
    expiry_label: str
    expiry_status: str
    status_variant: Literal["default", "destructive", "warning"]
    status_text: str


class BatchWithStatus(BaseModel):
    batch: BatchOut
    status: BatchStatus


class ProductGroup(BaseModel):
    product_id: str
    batches: List[BatchOut]
    total_quantity: int


class ProductGroupOut(BaseModel):
    product_id: str
    product_name: Optional[str] = None
    total_quantity: int
    batches: List[BatchWithStatus]


class InventoryOverview(BaseModel):
    total: int
    items: List[ProductGroupOut]
