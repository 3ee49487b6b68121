import httpx
import pytest

from warehouse.core.db import Base, engine, AsyncSessionLocal
from warehouse.core.security import hash_password
from warehouse.models.users.user_models import User
from warehouse.services.admin.backup_service import backup_sessions

from main import app


@pytest.fixture
async def client():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    backup_sessions.clear()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c

    await engine.dispose()


async def _register_and_login(client, email="owner@acme.com", password="secret123"):
    resp = await client.post(
        "/auth/register",
        json={"email": email, "password": password, "company_name": "Acme Traders"},
    )
    assert resp.status_code == 201, resp.text

    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.json()["data"]["auth"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


async def _admin_headers(client):
    async with AsyncSessionLocal() as db:
        db.add(
            User(
                id="admin-1",
                email="ops@acme.com",
                password_hash=hash_password("adminpass"),
                role="admin",
                company_name="Warehouse",
                is_active=True,
                token_version=0,
            )
        )
        await db.commit()

    resp = await client.post("/auth/login", json={"email": "ops@acme.com", "password": "adminpass"})
    token = resp.json()["data"]["auth"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


async def test_health(client):
    resp = await client.get("/")
    assert resp.json()["status"] == "ok"


async def test_duplicate_registration_conflicts(client):
    await _register_and_login(client)
    resp = await client.post(
        "/auth/register",
        json={"email": "owner@acme.com", "password": "secret123", "company_name": "Acme"},
    )
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "EMAIL_EXISTS"


async def test_wrong_password_is_rejected(client):
    await _register_and_login(client)
    resp = await client.post("/auth/login", json={"email": "owner@acme.com", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json()["success"] is False


async def test_inventory_lifecycle(client):
    headers = await _register_and_login(client)

    resp = await client.post(
        "/api/products",
        json={"sku": "WID-1", "name": "Widget", "weight_kg": "2.5"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    product_id = resp.json()["data"]["id"]

    resp = await client.post(
        "/api/inventory",
        json={"product_id": product_id, "quantity": 10, "location": "Rack A", "min_stock_level": 6},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    batch_id = resp.json()["data"]["id"]

    # damage always deducts, whatever sign was typed
    resp = await client.post(
        f"/api/inventory/{batch_id}/adjust",
        json={"quantity": "3", "reason": "damage"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()["data"]
    assert body["batch"]["quantity"] == 7
    assert body["transaction"]["quantity"] == -3
    assert body["transaction"]["notes"] == "Damage"

    resp = await client.post(
        f"/api/inventory/{batch_id}/adjust",
        json={"quantity": "lots", "reason": "found"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_INPUT"

    resp = await client.post(
        "/api/locations",
        json={"building_number": "12B", "location": "MG Road", "pincode": "560001", "phone": "9999999999"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    location_id = resp.json()["data"]["id"]

    resp = await client.post(
        "/api/inventory-requests",
        json={"type": "outbound", "items": [{"product_id": product_id, "quantity": 99}], "location_id": location_id},
        headers=headers,
    )
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "INSUFFICIENT_INVENTORY"

    resp = await client.post(
        "/api/inventory-requests",
        json={"type": "outbound", "items": [{"product_id": product_id, "quantity": 2}], "location_id": location_id},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    request = resp.json()["data"]
    assert request["status"] == "pending"
    assert request["fee"] == 150
    assert request["pickup_location"] is None
    assert request["delivery_location"]["pincode"] == "560001"

    resp = await client.get("/api/inventory", headers=headers)
    group = resp.json()["data"]["items"][0]
    assert group["product_name"] == "Widget"
    assert group["total_quantity"] == 5
    assert group["batches"][0]["status"]["status_text"] == "Low"

    resp = await client.get("/api/inventory/transactions", headers=headers)
    assert [t["type"] for t in resp.json()["data"]] == ["damage", "outbound"]

    resp = await client.get("/api/inventory-requests", headers=headers)
    assert resp.json()["data"]["total"] == 1


async def test_anonymous_request_submission_is_unauthenticated(client):
    resp = await client.post(
        "/api/inventory-requests",
        json={"type": "inbound", "items": [{"product_id": "prd-1", "quantity": 1}]},
    )
    assert resp.status_code == 401
    assert resp.json()["error_code"] == "UNAUTHENTICATED"


async def test_incomplete_location(client):
    headers = await _register_and_login(client)
    resp = await client.post(
        "/api/locations",
        json={"building_number": "12B", "location": " ", "pincode": "560001", "phone": "9"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INCOMPLETE_LOCATION"


async def test_batch_mutation_endpoint(client):
    resp = await client.patch("/api/inventory/inv-404", json={"quantity": 1})
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "BATCH_NOT_FOUND"

    payload = {"product_id": "prd-1", "merchant_id": "merchant-1", "quantity": 4}
    resp = await client.post("/api/inventory/inv-new", json=payload)
    assert resp.status_code == 201
    assert resp.json()["data"]["id"] == "inv-new"

    resp = await client.post("/api/inventory/inv-new", json=payload)
    assert resp.status_code == 409

    resp = await client.patch("/api/inventory/inv-new", json={"quantity": -2})
    assert resp.status_code == 200
    assert resp.json()["data"]["quantity"] == -2
    assert resp.json()["data"]["version"] == 2


async def test_expiry_status_is_derived_on_write(client):
    headers = await _register_and_login(client)

    resp = await client.post(
        "/api/inventory",
        json={"product_id": "prd-old", "quantity": 3, "expiry_date": "2020-01-01"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    batch = resp.json()["data"]
    assert batch["expiry_status"] == "expired"

    resp = await client.get("/api/inventory", headers=headers)
    assert resp.json()["data"]["items"][0]["batches"][0]["status"]["status_text"] == "Expired"

    resp = await client.patch(f"/api/inventory/{batch['id']}", json={"expiry_date": None})
    assert resp.status_code == 200
    assert resp.json()["data"]["expiry_status"] is None

    resp = await client.get("/api/inventory", headers=headers)
    assert resp.json()["data"]["items"][0]["batches"][0]["status"]["status_text"] == "OK"

    resp = await client.post(
        "/api/inventory/inv-future",
        json={"product_id": "prd-new", "merchant_id": "m", "expiry_date": "2999-01-01"},
    )
    assert resp.json()["data"]["expiry_status"] == "normal"


async def test_orders(client):
    resp = await client.post("/api/orders", json={"customerName": "Ravi"})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "ORDER_ID_REQUIRED"

    for order_id, day in (("ord-1", "2025-01-01"), ("ord-2", "2025-02-01")):
        resp = await client.post(
            "/api/orders",
            json={
                "id": order_id,
                "merchantId": "merchant-1",
                "date": day,
                "items": [{"productId": "prd-1", "name": "Widget", "quantity": 1}],
            },
        )
        assert resp.status_code == 201, resp.text

    resp = await client.post("/api/orders", json={"id": "ord-1"})
    assert resp.status_code == 409

    resp = await client.get("/api/orders")
    orders = resp.json()["data"]
    assert [o["id"] for o in orders] == ["ord-2", "ord-1"]
    assert orders[0]["items"][0]["productId"] == "prd-1"


async def test_backup_then_restore(client):
    headers = await _register_and_login(client)
    admin_headers = await _admin_headers(client)

    await client.put("/api/state/theme", json="dark", headers=headers)
    await client.put("/api/state/cart", json=[{"merchantId": "someone-else"}], headers=headers)

    resp = await client.post("/admin/backup", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"cart": []}

    # the filtered merchant export must not be written back over shared state
    resp = await client.post("/admin/restore", content=b'{"cart": []}', headers=headers)
    assert resp.status_code == 403
    resp = await client.get("/api/state/cart")
    assert resp.json()["data"]["value"] == [{"merchantId": "someone-else"}]

    resp = await client.post("/admin/restore", content=b"{}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "BACKUP_REQUIRED"

    resp = await client.post("/admin/backup", headers=admin_headers)
    assert resp.json()["data"] == {"cart": [{"merchantId": "someone-else"}]}

    resp = await client.post("/admin/restore", content=b"[1, 2]", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_BACKUP_FORMAT"

    resp = await client.post(
        "/admin/restore",
        content=b'{"cart": [{"id": 1}], "theme": "light"}',
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["restored"] == ["cart"]

    resp = await client.get("/api/state/cart")
    assert resp.json()["data"]["value"] == [{"id": 1}]

    resp = await client.post("/admin/backup?format=zip", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/zip"


async def test_payments_are_admin_only(client):
    headers = await _register_and_login(client)
    resp = await client.get("/admin/payments", headers=headers)
    assert resp.status_code == 403

    admin_headers = await _admin_headers(client)
    resp = await client.get("/admin/payments", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["total_fees"] == 0


async def test_product_update_and_delete(client):
    headers = await _register_and_login(client)
    other = await _register_and_login(client, email="rival@acme.com")

    ids = []
    for sku in ("WID-1", "WID-2"):
        resp = await client.post("/api/products", json={"sku": sku, "name": sku, "weight_kg": "1"}, headers=headers)
        ids.append(resp.json()["data"]["id"])

    resp = await client.put(f"/api/products/{ids[0]}", json={"sku": "WID-2"}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "PRODUCT_SKU_EXISTS"

    resp = await client.put(f"/api/products/{ids[0]}", json={"name": "Blue widget"}, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["name"] == "Blue widget"
    assert resp.json()["data"]["sku"] == "WID-1"

    resp = await client.put(f"/api/products/{ids[0]}", json={"name": "Stolen"}, headers=other)
    assert resp.status_code == 404

    await client.post("/api/inventory", json={"product_id": ids[0], "quantity": 4}, headers=headers)
    await client.post("/api/inventory", json={"product_id": ids[1], "quantity": 2}, headers=headers)

    resp = await client.delete(f"/api/products/{ids[0]}", headers=headers)
    assert resp.status_code == 200

    resp = await client.get(f"/api/products/{ids[0]}", headers=headers)
    assert resp.status_code == 404
    resp = await client.get("/api/inventory", headers=headers)
    assert [g["product_id"] for g in resp.json()["data"]["items"]] == [ids[1]]


async def test_batch_delete_is_owner_only(client):
    headers = await _register_and_login(client)
    other = await _register_and_login(client, email="rival@acme.com")

    resp = await client.post("/api/inventory", json={"product_id": "prd-1", "quantity": 4}, headers=headers)
    batch_id = resp.json()["data"]["id"]

    resp = await client.delete(f"/api/inventory/{batch_id}")
    assert resp.status_code == 401

    resp = await client.delete(f"/api/inventory/{batch_id}", headers=other)
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "BATCH_NOT_FOUND"

    resp = await client.delete(f"/api/inventory/{batch_id}", headers=headers)
    assert resp.status_code == 200
    resp = await client.get("/api/inventory", headers=headers)
    assert resp.json()["data"]["items"] == []


async def test_request_completion_and_slip(client):
    headers = await _register_and_login(client)
    admin_headers = await _admin_headers(client)

    resp = await client.post("/api/products", json={"sku": "WID-1", "name": "Widget", "weight_kg": "2"}, headers=headers)
    product_id = resp.json()["data"]["id"]
    location = {"building_number": "12B", "location": "MG Road", "pincode": "560001", "phone": "9999999999"}

    resp = await client.post(
        "/api/inventory-requests",
        json={"type": "inbound", "items": [{"product_id": product_id, "quantity": 5}], "location": location},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    request_id = resp.json()["data"]["id"]

    resp = await client.get(f"/api/inventory-requests/{request_id}/slip", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")

    resp = await client.post(f"/api/inventory-requests/{request_id}/complete", headers=headers)
    assert resp.status_code == 403

    resp = await client.post(f"/api/inventory-requests/{request_id}/complete", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["status"] == "completed"

    resp = await client.post(f"/api/inventory-requests/{request_id}/cancel", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "REQUEST_NOT_PENDING"

    resp = await client.get("/api/inventory", headers=headers)
    group = resp.json()["data"]["items"][0]
    assert group["total_quantity"] == 5
    assert group["batches"][0]["batch"]["location"] == "Default Warehouse"

    resp = await client.get("/api/inventory/transactions", headers=headers)
    fee = [t for t in resp.json()["data"] if t["type"] == "inbound_fee"]
    assert len(fee) == 1
    assert fee[0]["amount"] == 150
    assert fee[0]["product_id"] is None
