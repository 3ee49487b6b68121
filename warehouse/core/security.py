# warehouse/core/security.py

from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext
from jose import jwt, JWTError

from warehouse.core.config import (
    JWT_ACCESS_SECRET_KEY,
    JWT_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)
from warehouse.core.exceptions import AppException
from warehouse.constants.error_codes import ErrorCode

# =====================================================
# PASSWORD HASHING
# =====================================================
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# =====================================================
# ACCESS TOKEN
# =====================================================
def create_access_token(user_id: str, role: str, token_version: int) -> str:
    """Token identifying a user. The role claim drives advisory UI gating only."""
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,
        "role": role,
        "token_version": token_version,
        "type": "access",
        "iat": now,
        "exp": now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }

    return jwt.encode(payload, JWT_ACCESS_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            JWT_ACCESS_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
        )
    except JWTError:
        raise AppException(401, "Invalid or expired token", ErrorCode.UNAUTHORIZED)

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AppException(401, "Invalid token", ErrorCode.UNAUTHORIZED)

    return payload
