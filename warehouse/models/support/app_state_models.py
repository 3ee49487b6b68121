from sqlalchemy import Column, String, Text
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin


class AppState(Base, TimestampMixin):
    """Client key/value state. Values are raw JSON text, exactly as stored."""

    __tablename__ = "app_state"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return f"<AppState key={self.key}>"
