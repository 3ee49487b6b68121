from sqlalchemy import Column, String
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, MerchantScopedMixin


class MerchantLocation(Base, TimestampMixin, MerchantScopedMixin):
    """Saved pickup/delivery address of a merchant."""

    __tablename__ = "merchant_locations"

    id = Column(String(64), primary_key=True)
    building_number = Column(String(100), nullable=False)
    location = Column(String(255), nullable=False)
    pincode = Column(String(20), nullable=False)
    phone = Column(String(32), nullable=False)

    def __repr__(self):
        return f"<MerchantLocation id={self.id} merchant_id={self.merchant_id} pincode={self.pincode}>"
