from fastapi import APIRouter, Depends, status

from warehouse.core.dependencies import get_store
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.schemas.inventory.location_schemas import LocationFields, LocationOut
from warehouse.services.inventory.location_service import (
    add_location,
    list_for_merchant,
    get_for_merchant,
    update_location,
    delete_location,
)
from warehouse.utils.get_user import get_current_actor
from warehouse.utils.response import APIResponse, success_response

router = APIRouter(prefix="/api/locations", tags=["Locations"])


def _merchant_id(actor: Actor | None) -> str | None:
    return actor.id if actor else None


@router.post("", response_model=APIResponse[LocationOut], status_code=status.HTTP_201_CREATED)
async def add_location_api(
    payload: LocationFields,
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    location = await add_location(store, payload, _merchant_id(actor), actor)
    return success_response("Location saved successfully", location)


@router.get("", response_model=APIResponse[list[LocationOut]])
async def list_locations_api(
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    locations = await list_for_merchant(store, _merchant_id(actor))
    return success_response("Locations fetched successfully", locations)


@router.get("/{location_id}", response_model=APIResponse[LocationOut])
async def get_location_api(
    location_id: str,
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    location = await get_for_merchant(store, location_id, _merchant_id(actor))
    return success_response("Location fetched successfully", location)


@router.put("/{location_id}", response_model=APIResponse[LocationOut])
async def update_location_api(
    location_id: str,
    payload: LocationFields,
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    location = await update_location(store, location_id, payload, _merchant_id(actor), actor)
    return success_response("Location updated successfully", location)


@router.delete("/{location_id}")
async def delete_location_api(
    location_id: str,
    store=Depends(get_store),
    actor: Actor | None = Depends(get_current_actor),
):
    await delete_location(store, location_id, _merchant_id(actor), actor)
    return success_response("Location deleted successfully")
