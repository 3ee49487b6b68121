from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal

from warehouse.models.enums.user_role import UserRole


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    company_name: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"


class UserOut(BaseModel):
    id: str
    email: str
    role: UserRole
    company_name: str
    is_active: bool

    class Config:
        from_attributes = True


class LoginData(BaseModel):
    auth: TokenResponse
    user: UserOut


class Actor(BaseModel):
    """The identified caller. Role checks against it are advisory only."""

    id: str
    email: str
    role: UserRole = UserRole.merchant

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.admin, UserRole.superadmin)

    @property
    def merchant_id(self) -> Optional[str]:
        return None if self.is_admin else self.id
