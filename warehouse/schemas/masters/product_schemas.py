# warehouse/schemas/masters/product_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal


class ProductCreate(BaseModel):
    sku: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    weight_kg: Optional[Decimal] = Field(default=None, ge=0)
    merchant_id: Optional[str] = None


class ProductUpdate(BaseModel):
    """Partial update. Only fields present in the payload are written."""

    sku: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    weight_kg: Optional[Decimal] = Field(default=None, ge=0)


class ProductOut(BaseModel):
    id: str
    merchant_id: str
    sku: str
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    weight_kg: Optional[Decimal] = None

    class Config:
        from_attributes = True


class ProductListData(BaseModel):
    total: int
    items: List[ProductOut]
