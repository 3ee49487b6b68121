# warehouse/routers/inventory/inventory_request_router.py

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse

from warehouse.core.dependencies import get_store, get_inventory_gateway
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.schemas.inventory.inventory_request_schemas import (
    InventoryRequestCreate,
    InventoryRequestOut,
    InventoryRequestListData,
)
from warehouse.schemas.inventory.location_schemas import LocationSnapshot
from warehouse.services.inventory.inventory_request_service import (
    submit_request,
    list_requests,
    get_request,
    complete_request,
    cancel_request,
)
from warehouse.services.inventory.location_service import get_for_merchant
from warehouse.utils.get_user import get_current_actor
from warehouse.utils.pdf_generators.request_slip_pdf import generate_request_slip_pdf
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/api/inventory-requests", tags=["Inventory Requests"])
logger = get_logger(__name__)


@router.post("", response_model=APIResponse[InventoryRequestOut], status_code=status.HTTP_201_CREATED)
async def submit_request_api(
    payload: InventoryRequestCreate,
    store=Depends(get_store),
    gateway=Depends(get_inventory_gateway),
    actor: Actor | None = Depends(get_current_actor),
):
    merchant_id = None
    if actor is not None:
        merchant_id = payload.merchant_id if (actor.is_admin and payload.merchant_id) else actor.id

    location = payload.location
    if payload.location_id:
        saved = await get_for_merchant(store, payload.location_id, merchant_id)
        location = LocationSnapshot(**saved.model_dump())

    logger.info(
        "Submit inventory request",
        extra={"request_type": payload.type.value, "merchant_id": merchant_id, "lines": len(payload.items)},
    )
    request = await submit_request(
        store,
        gateway,
        request_type=payload.type,
        items=payload.items,
        location=location,
        merchant_id=merchant_id,
        actor=actor,
    )
    return success_response("Inventory request submitted", request)


@router.get("", response_model=APIResponse[InventoryRequestListData])
async def list_requests_api(
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    items = await list_requests(store, actor)
    return success_response(
        "Inventory requests fetched successfully",
        InventoryRequestListData(total=len(items), items=items),
    )


@router.get("/{request_id}", response_model=APIResponse[InventoryRequestOut])
async def get_request_api(
    request_id: str,
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    request = await get_request(store, request_id, actor)
    return success_response("Inventory request fetched successfully", request)


@router.get("/{request_id}/slip")
async def request_slip_api(
    request_id: str,
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    request = await get_request(store, request_id, actor)
    products = await store.products.get_many(i.product_id for i in request.items)
    file_path = generate_request_slip_pdf(request, products)
    return FileResponse(
        file_path,
        media_type="application/pdf",
        filename=f"Request_{request.id}.pdf",
    )


# =====================================================
# STATUS TRANSITIONS
# =====================================================
@router.post("/{request_id}/complete", response_model=APIResponse[InventoryRequestOut])
async def complete_request_api(
    request_id: str,
    store=Depends(get_store),
    gateway=Depends(get_inventory_gateway),
    actor: Actor | None = Depends(get_current_actor),
):
    logger.info("Complete inventory request", extra={"request_id": request_id})
    request = await complete_request(store, gateway, request_id, actor)
    return success_response("Inventory request completed", request)


@router.post("/{request_id}/cancel", response_model=APIResponse[InventoryRequestOut])
async def cancel_request_api(
    request_id: str,
    store=Depends(get_store),
    gateway=Depends(get_inventory_gateway),
    actor: Actor | None = Depends(get_current_actor),
):
    logger.info("Cancel inventory request", extra={"request_id": request_id})
    request = await cancel_request(store, gateway, request_id, actor)
    return success_response("Inventory request cancelled", request)
