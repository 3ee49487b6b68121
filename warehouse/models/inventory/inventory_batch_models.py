from sqlalchemy import Column, Integer, String, JSON, Index
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, MerchantScopedMixin


class InventoryBatch(Base, TimestampMixin, MerchantScopedMixin):
    """Stock of one product for one merchant/location/expiry combination.

    quantity may go negative after deductions; there is no check constraint.
    """

    __tablename__ = "inventory_batches"

    id = Column(String(64), primary_key=True)
    product_id = Column(String(64), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    location = Column(String(255), nullable=False, default="")
    min_stock_level = Column(Integer, nullable=False, default=0)
    max_stock_level = Column(Integer, nullable=False, default=0)
    expiry_date = Column(String(64), nullable=True)
    expiry_status = Column(String(32), nullable=True, index=True)
    last_adjustment = Column(JSON, nullable=True)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (Index("ix_inventory_batch_merchant_product", "merchant_id", "product_id"),)

    def __repr__(self):
        return f"<InventoryBatch id={self.id} product_id={self.product_id} merchant_id={self.merchant_id} qty={self.quantity}>"
