from sqlalchemy import Column, Integer, String, Numeric, Index, UniqueConstraint
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, MerchantScopedMixin


class Product(Base, TimestampMixin, MerchantScopedMixin):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    sku = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    description = Column(String(500), nullable=True)
    weight_kg = Column(Numeric(10, 3), nullable=True)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("merchant_id", "sku", name="uq_product_merchant_sku"),
        Index("ix_product_name_category", "name", "category"),
    )

    def __repr__(self):
        return f"<Product id={self.id} sku={self.sku} name={self.name}>"
