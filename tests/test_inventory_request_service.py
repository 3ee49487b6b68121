from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from warehouse.constants.error_codes import ErrorCode
from warehouse.constants.inventory_movement_type import TransactionType
from warehouse.core.exceptions import AppException, InsufficientInventoryError, RemoteFailureError, ValidationError
from warehouse.models.enums.inventory_request_status import RequestStatus
from warehouse.models.enums.inventory_request_type import RequestType
from warehouse.schemas.inventory.inventory_request_schemas import RequestItemIn, RequestItemOut
from warehouse.schemas.inventory.location_schemas import LocationSnapshot
from warehouse.schemas.masters.product_schemas import ProductOut
from warehouse.services.inventory.inventory_request_service import (
    compute_fee,
    compute_total_weight,
    submit_request,
    list_requests,
    complete_request,
    cancel_request,
)

LOCATION = LocationSnapshot(
    id="loc-1",
    merchant_id="merchant-1",
    building_number="12B",
    location="MG Road",
    pincode="560001",
    phone="9999999999",
)


def _product(product_id, weight):
    return ProductOut(id=product_id, merchant_id="merchant-1", sku=product_id.upper(), name=product_id, weight_kg=weight)


# ---------------- fees ----------------
@pytest.mark.parametrize(
    "weight, fee",
    [("0", 150), ("0.5", 150), ("1", 150), ("10", 150), ("10.01", 300), ("20", 300), ("25", 450)],
)
def test_fee_is_charged_per_started_ten_kg_block(weight, fee):
    assert compute_fee(Decimal(weight)) == fee


def test_total_weight_ignores_unknown_products_and_missing_weights():
    products = {"a": _product("a", Decimal("2.5")), "b": _product("b", None)}
    items = [
        RequestItemOut(product_id="a", quantity=3),
        RequestItemOut(product_id="b", quantity=10),
        RequestItemOut(product_id="ghost", quantity=4),
    ]
    assert compute_total_weight(items, products) == Decimal("7.5")


# ---------------- validation ----------------
async def test_missing_merchant_is_checked_first(store, gateway):
    with pytest.raises(ValidationError) as exc:
        await submit_request(
            store, gateway, request_type=RequestType.inbound, items=[], location=None, merchant_id=None
        )
    assert exc.value.error_code == ErrorCode.UNAUTHENTICATED
    assert exc.value.status_code == 401


async def test_missing_location(store, gateway):
    with pytest.raises(ValidationError) as exc:
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[RequestItemIn(product_id="prd-1", quantity=1)],
            location=None,
            merchant_id="merchant-1",
        )
    assert exc.value.error_code == ErrorCode.MISSING_LOCATION


@pytest.mark.parametrize(
    "items",
    [
        [],
        [RequestItemIn(product_id="prd-1", quantity=0)],
        [RequestItemIn(product_id="prd-1", quantity=-2)],
        [RequestItemIn(product_id=None, quantity=2)],
        [RequestItemIn(product_id="prd-1", quantity=1), RequestItemIn(product_id="", quantity=1)],
    ],
)
async def test_invalid_items(store, gateway, items):
    with pytest.raises(ValidationError) as exc:
        await submit_request(
            store,
            gateway,
            request_type=RequestType.inbound,
            items=items,
            location=LOCATION,
            merchant_id="merchant-1",
        )
    assert exc.value.error_code == ErrorCode.INVALID_ITEM
    assert store.requests.items == []


# ---------------- inbound ----------------
async def test_inbound_creates_pending_request_without_touching_stock(store, gateway, merchant):
    await store.products.add(_product("prd-1", Decimal("4")))

    request = await submit_request(
        store,
        gateway,
        request_type=RequestType.inbound,
        items=[RequestItemIn(product_id="prd-1", quantity=3)],
        location=LOCATION,
        merchant_id="merchant-1",
        actor=merchant,
    )

    assert gateway.calls == []
    assert request.status == RequestStatus.pending
    assert request.pickup_location == LOCATION
    assert request.delivery_location is None
    assert request.total_weight_kg == Decimal("12")
    assert request.fee == 300
    assert store.requests.items == [request]
    assert store.activity.messages[0][0].value == "SUBMIT_INBOUND"


# ---------------- outbound ----------------
async def test_outbound_over_available_fails_without_mutations(store, gateway, make_batch):
    batch = make_batch(quantity=5)
    await store.batches.save(batch)
    gateway.seed(batch)

    with pytest.raises(InsufficientInventoryError) as exc:
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[RequestItemIn(product_id="prd-1", quantity=6)],
            location=LOCATION,
            merchant_id="merchant-1",
        )

    assert exc.value.status_code == 409
    assert exc.value.details["available"] == 5
    assert gateway.mutations == []
    assert store.requests.items == []


async def test_outbound_without_any_batch_is_insufficient(store, gateway):
    with pytest.raises(InsufficientInventoryError):
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[RequestItemIn(product_id="prd-9", quantity=1)],
            location=LOCATION,
            merchant_id="merchant-1",
        )
    assert gateway.calls == []


async def test_outbound_duplicate_lines_are_summed(store, gateway, make_batch):
    batch = make_batch(quantity=5)
    await store.batches.save(batch)
    gateway.seed(batch)

    with pytest.raises(InsufficientInventoryError):
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[
                RequestItemIn(product_id="prd-1", quantity=3),
                RequestItemIn(product_id="prd-1", quantity=3),
            ],
            location=LOCATION,
            merchant_id="merchant-1",
        )
    assert gateway.calls == []


async def test_outbound_other_merchants_stock_does_not_count(store, gateway, make_batch):
    batch = make_batch(merchant_id="merchant-2", quantity=50)
    await store.batches.save(batch)

    with pytest.raises(InsufficientInventoryError):
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[RequestItemIn(product_id="prd-1", quantity=1)],
            location=LOCATION,
            merchant_id="merchant-1",
        )


async def test_outbound_decrements_and_logs_each_line(store, gateway, make_batch, merchant):
    batch = make_batch(quantity=10)
    await store.batches.save(batch)
    gateway.seed(batch)

    request = await submit_request(
        store,
        gateway,
        request_type=RequestType.outbound,
        items=[
            RequestItemIn(product_id="prd-1", quantity=3),
            RequestItemIn(product_id="prd-1", quantity=2),
        ],
        location=LOCATION,
        merchant_id="merchant-1",
        actor=merchant,
    )

    updates = [c for c in gateway.calls if c[0] == "update"]
    assert [u[2]["quantity"] for u in updates] == [7, 5]
    assert updates[0][2]["last_adjustment"]["type"] == "outbound"
    assert updates[0][2]["last_adjustment"]["quantity"] == -3
    assert gateway.remote[batch.id].quantity == 5

    assert [t.quantity for t in store.transactions.items] == [-3, -2]
    assert all(t.type == TransactionType.OUTBOUND for t in store.transactions.items)

    assert request.delivery_location == LOCATION
    assert request.pickup_location is None
    assert request.status == RequestStatus.pending
    assert request.fee == 150


async def test_outbound_recreates_missing_remote_batch_once(store, gateway, make_batch):
    batch = make_batch(quantity=10)
    await store.batches.save(batch)

    request = await submit_request(
        store,
        gateway,
        request_type=RequestType.outbound,
        items=[RequestItemIn(product_id="prd-1", quantity=4)],
        location=LOCATION,
        merchant_id="merchant-1",
    )

    assert [c[0] for c in gateway.calls] == ["update", "create", "update"]
    created = gateway.calls[1][2]
    assert created.quantity == 6
    assert gateway.remote[batch.id].quantity == 6
    assert request.status == RequestStatus.pending


async def test_outbound_partial_failure_reports_applied_lines(store, gateway, make_batch):
    first = make_batch(id="inv-1", product_id="prd-1", quantity=10)
    second = make_batch(id="inv-2", product_id="prd-2", quantity=10)
    for batch in (first, second):
        await store.batches.save(batch)
        gateway.seed(batch)
    gateway.fail_ids.add("inv-2")

    with pytest.raises(RemoteFailureError) as exc:
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[
                RequestItemIn(product_id="prd-1", quantity=4),
                RequestItemIn(product_id="prd-2", quantity=1),
            ],
            location=LOCATION,
            merchant_id="merchant-1",
        )

    assert exc.value.details["applied_items"] == [
        {"product_id": "prd-1", "batch_id": "inv-1", "quantity": 4}
    ]
    assert gateway.remote["inv-1"].quantity == 6
    assert gateway.remote["inv-2"].quantity == 10
    assert len(store.transactions.items) == 1
    assert store.requests.items == []


async def test_outbound_log_failure_after_push_still_reports_applied_lines(store, gateway, make_batch):
    batch = make_batch(quantity=10)
    await store.batches.save(batch)
    gateway.seed(batch)
    store.transactions.fail_with = OperationalError("INSERT", {}, Exception("database is locked"))

    with pytest.raises(AppException) as exc:
        await submit_request(
            store,
            gateway,
            request_type=RequestType.outbound,
            items=[RequestItemIn(product_id="prd-1", quantity=4)],
            location=LOCATION,
            merchant_id="merchant-1",
        )

    assert exc.value.status_code == 500
    assert exc.value.error_code == ErrorCode.PARTIAL_FULFILLMENT
    assert exc.value.details["applied_items"] == [
        {"product_id": "prd-1", "batch_id": "inv-1", "quantity": 4}
    ]
    assert isinstance(exc.value.__cause__, OperationalError)
    assert gateway.remote["inv-1"].quantity == 6
    assert store.requests.items == []


# ---------------- listing ----------------
async def test_list_requests_scopes_merchants_and_sorts_newest_first(store, gateway, merchant, other_merchant, admin):
    for merchant_id in ("merchant-1", "merchant-2", "merchant-1"):
        await submit_request(
            store,
            gateway,
            request_type=RequestType.inbound,
            items=[RequestItemIn(product_id="prd-1", quantity=1)],
            location=LOCATION,
            merchant_id=merchant_id,
        )

    mine = await list_requests(store, merchant)
    assert len(mine) == 2
    assert all(r.merchant_id == "merchant-1" for r in mine)
    assert [r.id for r in mine] == sorted((r.id for r in mine), reverse=True)

    assert len(await list_requests(store, other_merchant)) == 1
    assert len(await list_requests(store, admin)) == 3


async def test_list_requests_requires_a_viewer(store):
    with pytest.raises(ValidationError) as exc:
        await list_requests(store, None)
    assert exc.value.error_code == ErrorCode.UNAUTHENTICATED


# ---------------- completion / cancellation ----------------
async def _submit(store, gateway, request_type, *items):
    return await submit_request(
        store,
        gateway,
        request_type=request_type,
        items=[RequestItemIn(product_id=p, quantity=q) for p, q in items],
        location=LOCATION,
        merchant_id="merchant-1",
    )


async def test_completing_inbound_credits_stock_and_books_fee(store, linked_gateway, make_batch, admin):
    await store.batches.save(make_batch(id="inv-1", product_id="prd-1", quantity=10))
    request = await _submit(store, linked_gateway, RequestType.inbound, ("prd-1", 3), ("prd-2", 2), ("prd-1", 1))

    completed = await complete_request(store, linked_gateway, request.id, admin)

    assert completed.status == RequestStatus.completed
    assert store.requests.items[0].status == RequestStatus.completed
    assert store.batches.items["inv-1"].quantity == 14
    created = [b for b in store.batches.items.values() if b.product_id == "prd-2"]
    assert len(created) == 1
    assert created[0].quantity == 2
    assert created[0].location == "Default Warehouse"

    types = [t.type for t in store.transactions.items]
    assert types == [TransactionType.INBOUND] * 3 + [TransactionType.INBOUND_FEE]
    fee_txn = store.transactions.items[-1]
    assert fee_txn.product_id is None
    assert fee_txn.amount == request.fee
    assert store.activity.messages[-1][0].value == "COMPLETE_REQUEST"


async def test_completing_outbound_only_books_fee(store, linked_gateway, make_batch, admin):
    await store.batches.save(make_batch(quantity=10))
    request = await _submit(store, linked_gateway, RequestType.outbound, ("prd-1", 4))
    calls_before = len(linked_gateway.calls)

    await complete_request(store, linked_gateway, request.id, admin)

    assert len(linked_gateway.calls) == calls_before
    assert store.batches.items["inv-1"].quantity == 6
    assert store.transactions.items[-1].type == TransactionType.OUTBOUND_FEE


async def test_only_admins_complete_requests(store, gateway, merchant):
    request = await _submit(store, gateway, RequestType.inbound, ("prd-1", 1))

    with pytest.raises(AppException) as exc:
        await complete_request(store, gateway, request.id, merchant)
    assert exc.value.status_code == 403

    with pytest.raises(ValidationError) as exc:
        await complete_request(store, gateway, request.id, None)
    assert exc.value.error_code == ErrorCode.UNAUTHENTICATED
    assert store.requests.items[0].status == RequestStatus.pending


async def test_closed_requests_cannot_change_again(store, linked_gateway, admin):
    request = await _submit(store, linked_gateway, RequestType.inbound, ("prd-1", 1))
    await complete_request(store, linked_gateway, request.id, admin)

    for action in (complete_request, cancel_request):
        with pytest.raises(AppException) as exc:
            await action(store, linked_gateway, request.id, admin)
        assert exc.value.status_code == 409
        assert exc.value.error_code == ErrorCode.REQUEST_NOT_PENDING

    assert store.batches.items[next(iter(store.batches.items))].quantity == 1


async def test_cancelling_outbound_puts_stock_back(store, linked_gateway, make_batch, merchant):
    await store.batches.save(make_batch(quantity=10))
    request = await _submit(store, linked_gateway, RequestType.outbound, ("prd-1", 4))
    assert store.batches.items["inv-1"].quantity == 6

    cancelled = await cancel_request(store, linked_gateway, request.id, merchant)

    assert cancelled.status == RequestStatus.cancelled
    assert store.batches.items["inv-1"].quantity == 10
    assert [t.type for t in store.transactions.items] == [TransactionType.OUTBOUND, TransactionType.RETURN]
    assert [t.quantity for t in store.transactions.items] == [-4, 4]


async def test_cancelling_inbound_leaves_stock_alone(store, linked_gateway, merchant):
    request = await _submit(store, linked_gateway, RequestType.inbound, ("prd-1", 5))

    await cancel_request(store, linked_gateway, request.id, merchant)

    assert linked_gateway.calls == []
    assert store.transactions.items == []
    assert store.requests.items[0].status == RequestStatus.cancelled


async def test_other_merchants_cannot_cancel(store, gateway, other_merchant):
    request = await _submit(store, gateway, RequestType.inbound, ("prd-1", 1))

    with pytest.raises(AppException) as exc:
        await cancel_request(store, gateway, request.id, other_merchant)
    assert exc.value.error_code == ErrorCode.REQUEST_NOT_FOUND
