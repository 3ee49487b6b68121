from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    product_id: Optional[str] = Field(default=None, alias="productId")
    name: Optional[str] = None
    quantity: Optional[int] = None


class OrderCreate(BaseModel):
    """Order as sent by the storefront. Field names follow its camelCase JSON."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    merchant_id: Optional[str] = Field(default=None, alias="merchantId")
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    phone: Optional[str] = None
    items: List[OrderItem] = []
    status: Optional[str] = None
    date: Optional[str] = None
    shipping_label_base64: Optional[str] = Field(default=None, alias="shippingLabelBase64")


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    merchant_id: Optional[str] = None
    customer_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    phone: Optional[str] = None
    items: List[dict] = []
    status: Optional[str] = None
    date: Optional[str] = None
    shipping_label_base64: Optional[str] = None
