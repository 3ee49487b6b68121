# warehouse/routers/admin/admin_router.py

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from warehouse.core.dependencies import get_store, get_kv_store
from warehouse.core.exceptions import ValidationError
from warehouse.constants.error_codes import ErrorCode
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.schemas.admin.admin_schemas import RestoreResult, StateValue, PaymentSummaryData
from warehouse.services.admin.backup_service import (
    export_state,
    build_backup_zip,
    restore_state,
    get_state,
    put_state,
)
from warehouse.services.admin.payment_summary_service import summarize_payments
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_actor
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/admin", tags=["Admin"])
state_router = APIRouter(prefix="/api/state", tags=["State"])
logger = get_logger(__name__)


def _require_actor(actor: Actor | None) -> Actor:
    if actor is None:
        raise ValidationError("Sign in to manage backups", ErrorCode.UNAUTHENTICATED)
    return actor


# =====================================================
# BACKUP / RESTORE
# =====================================================
@router.post("/backup")
async def backup_api(
    format: str = Query("json", pattern="^(json|zip)$"),
    kv=Depends(get_kv_store),
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    actor = _require_actor(actor)
    data = await export_state(kv, actor, activity=store.activity)
    await store.commit()

    if format == "zip":
        filename, content = build_backup_zip(data)
        return Response(
            content=content,
            media_type="application/zip",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    return success_response("Backup created", data)


@router.post("/restore", response_model=APIResponse[RestoreResult])
async def restore_api(
    request: Request,
    kv=Depends(get_kv_store),
    store=Depends(get_store),
    actor: Actor = Depends(require_role(["admin", "superadmin"])),
):
    raw = await request.body()
    result = await restore_state(kv, raw, actor, activity=store.activity)
    await store.commit()
    return success_response("Restore finished", result)


# =====================================================
# PAYMENTS
# =====================================================
@router.get("/payments", response_model=APIResponse[PaymentSummaryData])
async def payments_api(
    merchant_id: str | None = Query(None),
    store=Depends(get_store),
    actor: Actor = Depends(require_role(["admin", "superadmin"])),
):
    data = await summarize_payments(store, merchant_id)
    return success_response("Payment summary fetched successfully", data)


# =====================================================
# KEY/VALUE STATE
# =====================================================
@state_router.get("/{key}", response_model=APIResponse[StateValue])
async def get_state_api(key: str, kv=Depends(get_kv_store)):
    value = await get_state(kv, key)
    return success_response("State fetched", StateValue(key=key, value=value))


@state_router.put("/{key}", response_model=APIResponse[StateValue])
async def put_state_api(key: str, value: Any = Body(None), kv=Depends(get_kv_store)):
    await put_state(kv, key, value)
    return success_response("State saved", StateValue(key=key, value=value))
