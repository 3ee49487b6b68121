from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        onupdate=func.now()
    )


class MerchantScopedMixin:
    """Rows owned by one merchant. Merchant ids are plain strings, not FKs."""

    @declared_attr
    def merchant_id(cls):
        return Column(String(64), nullable=False, index=True)
