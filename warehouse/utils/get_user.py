from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.core.exceptions import AppException
from warehouse.core.security import decode_access_token
from warehouse.constants.error_codes import ErrorCode
from warehouse.models.users.user_models import User
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.utils.logger import get_logger

logger = get_logger("auth.guard")


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """The user behind the bearer token, or None for anonymous calls.

    Endpoints decide what an anonymous caller may do; a token that is present
    but invalid is always rejected.
    """
    if not authorization:
        return None

    if not authorization.startswith("Bearer "):
        logger.warning("Malformed authorization header")
        raise AppException(401, "Invalid authorization header", ErrorCode.UNAUTHORIZED)

    token = authorization.split("Bearer ")[1].strip()
    payload = decode_access_token(token)

    user_id = payload.get("sub")
    user = await db.get(User, user_id)

    if not user:
        logger.warning("Token user not found", extra={"user_id": user_id})
        raise AppException(401, "User not found", ErrorCode.UNAUTHORIZED)

    if not user.is_active:
        logger.warning("Inactive user access blocked", extra={"user_id": user.id})
        raise AppException(403, "User account is inactive", ErrorCode.PERMISSION_DENIED)

    if user.token_version != payload.get("token_version"):
        logger.warning("Token version mismatch", extra={"user_id": user.id})
        raise AppException(401, "Session expired", ErrorCode.UNAUTHORIZED)

    request.state.user = user
    return user


async def get_current_actor(user: Optional[User] = Depends(get_current_user)) -> Optional[Actor]:
    return Actor.model_validate(user) if user else None
