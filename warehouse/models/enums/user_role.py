import enum


class UserRole(str, enum.Enum):
    merchant = "merchant"
    admin = "admin"
    superadmin = "superadmin"
