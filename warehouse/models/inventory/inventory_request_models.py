from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey, JSON, Numeric, CheckConstraint, Index
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, MerchantScopedMixin
from warehouse.models.enums.inventory_request_type import RequestType
from warehouse.models.enums.inventory_request_status import RequestStatus


class InventoryRequest(Base, TimestampMixin, MerchantScopedMixin):
    """Inbound (stock arriving) or outbound (stock leaving) movement request.

    Locations are stored as snapshots so later edits to a saved location do
    not rewrite history.
    """

    __tablename__ = "inventory_requests"

    id = Column(String(64), primary_key=True)
    type = Column(Enum(RequestType), nullable=False, index=True)
    status = Column(Enum(RequestStatus), nullable=False, default=RequestStatus.pending, index=True)
    total_weight_kg = Column(Numeric(12, 3), nullable=False, default=0)
    fee = Column(Integer, nullable=False)
    pickup_location = Column(JSON, nullable=True)
    delivery_location = Column(JSON, nullable=True)
    date = Column(Date, nullable=False)

    items = relationship(
        "InventoryRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="InventoryRequestItem.position",
    )

    __table_args__ = (
        CheckConstraint("fee >= 0", name="ck_inventory_request_fee_non_negative"),
        Index("ix_inventory_request_merchant_date", "merchant_id", "date"),
    )

    def __repr__(self):
        return f"<InventoryRequest id={self.id} type={self.type} status={self.status}>"


class InventoryRequestItem(Base):
    __tablename__ = "inventory_request_items"

    id = Column(Integer, primary_key=True)
    request_id = Column(String(64), ForeignKey("inventory_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(String(64), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)

    request = relationship("InventoryRequest", back_populates="items")

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_inventory_request_item_quantity_positive"),)

    def __repr__(self):
        return f"<InventoryRequestItem request_id={self.request_id} product_id={self.product_id} qty={self.quantity}>"
