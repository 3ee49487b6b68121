from sqlalchemy import Column, Integer, String, Date, Text, Enum, Index
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, MerchantScopedMixin
from warehouse.constants.inventory_movement_type import TransactionType


class InventoryTransaction(Base, TimestampMixin, MerchantScopedMixin):
    """Immutable stock ledger. APPEND-ONLY. Never updated, never deleted."""

    __tablename__ = "inventory_transactions"

    id = Column(String(64), primary_key=True)
    # Empty for request fee entries.
    product_id = Column(String(64), nullable=True, index=True)
    batch_id = Column(String(64), nullable=True, index=True)
    type = Column(Enum(TransactionType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    quantity = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=True)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_inventory_transaction_merchant_date", "merchant_id", "date"),
    )

    def __repr__(self):
        return f"<InventoryTransaction id={self.id} batch_id={self.batch_id} type={self.type} qty={self.quantity}>"
