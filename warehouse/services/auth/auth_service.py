from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.models.users.user_models import User
from warehouse.models.enums.user_role import UserRole
from warehouse.core.security import hash_password, verify_password, create_access_token
from warehouse.core.exceptions import AppException
from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.activity_codes import ActivityCode
from warehouse.schemas.auth.auth_schemas import RegisterRequest, UserOut, LoginData, TokenResponse
from warehouse.utils.activity_helpers import emit_activity
from warehouse.utils.ids import new_id
from warehouse.utils.logger import get_logger

logger = get_logger("auth.service")


def _normalize_email(email: str) -> str:
    return email.strip().lower()


# =====================================================
# REGISTER
# =====================================================
async def register_merchant(db: AsyncSession, payload: RegisterRequest) -> UserOut:
    email = _normalize_email(payload.email)
    logger.info("Registering merchant", extra={"email": email})

    exists = await db.scalar(select(User.id).where(User.email == email))
    if exists:
        raise AppException(409, "Email already registered", ErrorCode.EMAIL_EXISTS)

    user = User(
        id=new_id("merchant"),
        email=email,
        password_hash=hash_password(payload.password),
        role=UserRole.merchant.value,
        company_name=payload.company_name.strip(),
        is_active=True,
        token_version=0,
    )
    db.add(user)
    await db.flush()

    await emit_activity(
        db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.REGISTER,
        actor_role="Merchant",
        actor_email=user.email,
        company_name=user.company_name,
    )

    await db.commit()
    await db.refresh(user)
    return UserOut.model_validate(user)


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, email: str, password: str) -> LoginData:
    email = _normalize_email(email)
    logger.info("Authenticating user", extra={"email": email})

    user = await db.scalar(select(User).where(User.email == email))

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"email": email})
        raise AppException(401, "Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"email": email})
        raise AppException(403, "User account is inactive", ErrorCode.PERMISSION_DENIED)

    user.last_login = datetime.now(timezone.utc)

    access_token = create_access_token(user.id, user.role, user.token_version)

    await emit_activity(
        db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.LOGIN,
        actor_role=user.role.capitalize(),
        actor_email=user.email,
    )

    await db.commit()
    await db.refresh(user)

    logger.info("Login successful", extra={"user_id": user.id})

    return LoginData(
        auth=TokenResponse(access_token=access_token),
        user=UserOut.model_validate(user),
    )
