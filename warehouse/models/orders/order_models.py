from sqlalchemy import Column, String, Text, JSON
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin


class Order(Base, TimestampMixin):
    """Customer order. The id is supplied by the client and must be unique."""

    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    merchant_id = Column(String(64), nullable=True, index=True)
    customer_name = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pincode = Column(String(20), nullable=True)
    phone = Column(String(32), nullable=True)
    items = Column(JSON, nullable=False, default=list)
    status = Column(String(50), nullable=True, index=True)
    date = Column(String(32), nullable=True, index=True)
    shipping_label_base64 = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Order id={self.id} merchant_id={self.merchant_id} status={self.status}>"
