# warehouse/repositories/inventory_gateway.py

from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.exceptions import BatchNotFoundError, RemoteFailureError
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut, BatchUpdate, BatchCreate
from warehouse.services.inventory import inventory_batch_service
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# LOCAL (same database)
# =====================================================
class SqlInventoryGateway:
    """Batch mutations applied straight to the local database, one commit per call."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def update_batch(self, batch_id: str, payload: dict) -> BatchOut:
        return await inventory_batch_service.update_batch(
            self.db, batch_id, BatchUpdate(**payload)
        )

    async def create_batch(self, batch: BatchOut) -> BatchOut:
        payload = BatchCreate(**batch.model_dump(exclude={"id", "version"}))
        return await inventory_batch_service.create_batch(self.db, batch.id, payload)


# =====================================================
# REMOTE (HTTP inventory API)
# =====================================================
class HttpInventoryGateway:
    """Talks to ``PATCH``/``POST {base_url}/api/inventory/{batch_id}``.

    Responses use the ``{"success", "message", "data"}`` envelope. No timeout
    is configured beyond httpx's default.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[dict] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            transport=self.transport,
        )

    async def _send(self, method: str, batch_id: str, body: dict) -> httpx.Response:
        url = f"/api/inventory/{batch_id}"
        try:
            async with self._client() as client:
                return await client.request(method, url, json=body)
        except httpx.HTTPError as exc:
            logger.error(
                "Inventory API unreachable",
                extra={"method": method, "batch_id": batch_id, "error": str(exc)},
            )
            raise RemoteFailureError(
                f"Inventory API request failed: {exc}",
                details={"batch_id": batch_id},
            ) from exc

    @staticmethod
    def _parse(resp: httpx.Response, batch_id: str) -> BatchOut:
        try:
            body = resp.json()
            data = body.get("data", body) if isinstance(body, dict) else body
            return BatchOut.model_validate(data)
        except ValueError as exc:
            raise RemoteFailureError(
                "Inventory API returned an unreadable batch",
                details={"batch_id": batch_id},
            ) from exc

    def _raise_for_status(self, resp: httpx.Response, batch_id: str) -> None:
        if resp.status_code == 404:
            raise BatchNotFoundError(batch_id)
        if resp.is_error:
            logger.error(
                "Inventory API error",
                extra={"batch_id": batch_id, "status_code": resp.status_code},
            )
            raise RemoteFailureError(
                f"Inventory API responded with {resp.status_code}",
                details={"batch_id": batch_id, "status_code": resp.status_code},
            )

    async def update_batch(self, batch_id: str, payload: dict) -> BatchOut:
        resp = await self._send("PATCH", batch_id, payload)
        self._raise_for_status(resp, batch_id)
        return self._parse(resp, batch_id)

    async def create_batch(self, batch: BatchOut) -> BatchOut:
        body = batch.model_dump(mode="json", exclude={"id", "version"})
        resp = await self._send("POST", batch.id, body)
        self._raise_for_status(resp, batch.id)
        return self._parse(resp, batch.id)
