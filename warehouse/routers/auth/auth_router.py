from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.core.exceptions import ValidationError
from warehouse.constants.error_codes import ErrorCode
from warehouse.schemas.auth.auth_schemas import RegisterRequest, LoginRequest, UserOut, LoginData
from warehouse.services.auth.auth_service import register_merchant, login_user
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=APIResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Registration attempt", extra={"email": payload.email})
    user = await register_merchant(db, payload)
    return success_response("Registration successful", user)


@router.post("/login", response_model=APIResponse[LoginData])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"email": payload.email})
    data = await login_user(db, payload.email, payload.password)
    return success_response("Login successful", data)


@router.get("/me", response_model=APIResponse[UserOut])
async def me(current_user=Depends(get_current_user)):
    if current_user is None:
        raise ValidationError("Not signed in", ErrorCode.UNAUTHENTICATED)
    return success_response("Current user", UserOut.model_validate(current_user))
