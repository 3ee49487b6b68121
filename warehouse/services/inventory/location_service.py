# warehouse/services/inventory/location_service.py

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.error_codes import ErrorCode
from warehouse.core.exceptions import AppException, ValidationError
from warehouse.repositories.base import WarehouseStore
from warehouse.schemas.inventory.location_schemas import LocationFields, LocationOut
from warehouse.utils.activity_helpers import actor_context
from warehouse.utils.format_location import format_location
from warehouse.utils.ids import new_id
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("building_number", "location", "pincode", "phone")


def _require_merchant(merchant_id: str | None) -> str:
    if not merchant_id:
        raise ValidationError("Sign in as a merchant to manage locations", ErrorCode.UNAUTHENTICATED)
    return merchant_id


def _clean_fields(fields: LocationFields) -> dict:
    cleaned = {name: (getattr(fields, name) or "").strip() for name in REQUIRED_FIELDS}
    missing = [name for name, value in cleaned.items() if not value]
    if missing:
        raise ValidationError(
            "Building number, location, pincode and phone are all required",
            ErrorCode.INCOMPLETE_LOCATION,
            details={"missing": missing},
        )
    return cleaned


# =====================================================
# CREATE
# =====================================================
async def add_location(store: WarehouseStore, fields: LocationFields, merchant_id: str | None, actor=None) -> LocationOut:
    merchant_id = _require_merchant(merchant_id)
    location = LocationOut(id=new_id("loc"), merchant_id=merchant_id, **_clean_fields(fields))

    await store.locations.add(location)
    if actor is not None:
        await store.activity.emit(
            user_id=actor.id,
            username=actor.email,
            code=ActivityCode.CREATE_LOCATION,
            **actor_context(actor),
            target_name=format_location(location),
        )
    await store.commit()

    logger.info("Location saved", extra={"location_id": location.id, "merchant_id": merchant_id})
    return location


# =====================================================
# READ
# =====================================================
async def list_for_merchant(store: WarehouseStore, merchant_id: str | None) -> list[LocationOut]:
    merchant_id = _require_merchant(merchant_id)
    return [loc for loc in await store.locations.list_all() if loc.merchant_id == merchant_id]


async def get_for_merchant(store: WarehouseStore, location_id: str, merchant_id: str | None) -> LocationOut:
    merchant_id = _require_merchant(merchant_id)
    location = await store.locations.get(location_id)
    if not location or location.merchant_id != merchant_id:
        raise AppException(404, "Location not found", ErrorCode.LOCATION_NOT_FOUND)
    return location


# =====================================================
# UPDATE / DELETE
# =====================================================
async def update_location(
    store: WarehouseStore,
    location_id: str,
    fields: LocationFields,
    merchant_id: str | None,
    actor=None,
) -> LocationOut:
    current = await get_for_merchant(store, location_id, merchant_id)
    cleaned = _clean_fields(fields)

    changes = [name for name in REQUIRED_FIELDS if getattr(current, name) != cleaned[name]]
    updated = current.model_copy(update=cleaned)
    await store.locations.update(updated)

    if actor is not None:
        await store.activity.emit(
            user_id=actor.id,
            username=actor.email,
            code=ActivityCode.UPDATE_LOCATION,
            **actor_context(actor),
            target_name=updated.id,
            changes=", ".join(changes) or "no changes",
        )
    await store.commit()
    return updated


async def delete_location(store: WarehouseStore, location_id: str, merchant_id: str | None, actor=None) -> None:
    location = await get_for_merchant(store, location_id, merchant_id)
    await store.locations.delete(location.id)

    if actor is not None:
        await store.activity.emit(
            user_id=actor.id,
            username=actor.email,
            code=ActivityCode.DELETE_LOCATION,
            **actor_context(actor),
            target_name=format_location(location),
        )
    await store.commit()
    logger.info("Location deleted", extra={"location_id": location.id, "merchant_id": location.merchant_id})
