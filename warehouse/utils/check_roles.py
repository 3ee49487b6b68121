from fastapi import Depends

from warehouse.core.exceptions import AppException
from warehouse.constants.error_codes import ErrorCode
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.utils.get_user import get_current_actor


def require_role(roles: list[str]):
    """Gate a route on the caller's role claim (screen-level gating, not data security)."""
    allowed = {r.lower() for r in roles}

    async def role_checker(actor: Actor | None = Depends(get_current_actor)) -> Actor:
        if actor is None:
            raise AppException(401, "Sign in required", ErrorCode.UNAUTHENTICATED)
        if actor.role.value not in allowed:
            raise AppException(403, "Permission denied", ErrorCode.PERMISSION_DENIED)
        return actor

    return role_checker
