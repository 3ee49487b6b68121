from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from warehouse.core.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(50), nullable=False, default="merchant")
    company_name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    token_version = Column(Integer, nullable=False, default=0)
    last_login = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role in {"admin", "superadmin"}

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"
