# warehouse/services/admin/backup_service.py
"""Export and restore of the client key/value state.

State rows are shared by every merchant, so restores are admin-only. A restore
overwrites data and is only accepted after the same admin has exported a
backup during the current server session.
"""

import io
import json
import zipfile
from datetime import datetime, timezone
from typing import Any

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.error_codes import ErrorCode
from warehouse.core.exceptions import AppException, BackupRequiredError, InvalidBackupFormatError
from warehouse.repositories.base import KeyValueStore, ActivitySink
from warehouse.schemas.admin.admin_schemas import RestoreResult
from warehouse.utils.activity_helpers import actor_context
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)

RESERVED_KEYS = frozenset({"theme"})


# =====================================================
# SESSION BACKUP TRACKING
# =====================================================
class BackupSessions:
    """Per-user record of backups made since the process started."""

    def __init__(self):
        self._created: dict[str, datetime] = {}

    def mark(self, user_id: str) -> None:
        self._created[user_id] = datetime.now(timezone.utc)

    def has_backup(self, user_id: str) -> bool:
        return user_id in self._created

    def last_backup(self, user_id: str) -> datetime | None:
        return self._created.get(user_id)

    def clear(self) -> None:
        self._created.clear()


backup_sessions = BackupSessions()


# =====================================================
# EXPORT
# =====================================================
def _belongs_to(item: Any, merchant_id: str) -> bool:
    if not item:
        return False
    if isinstance(item, dict):
        if item.get("merchantId"):
            return item["merchantId"] == merchant_id
        product = item.get("product")
        if isinstance(product, dict) and product.get("merchantId"):
            return product["merchantId"] == merchant_id
        return any(v == merchant_id for v in item.values())
    return False


async def export_state(
    kv: KeyValueStore,
    viewer,
    sessions: BackupSessions = backup_sessions,
    activity: ActivitySink | None = None,
) -> dict[str, Any]:
    """Everything except reserved keys; merchants only get their own array entries."""
    is_merchant = viewer is not None and not viewer.is_admin
    data: dict[str, Any] = {}

    for key, raw in await kv.items():
        if key in RESERVED_KEYS:
            continue
        try:
            value = json.loads(raw)
        except ValueError:
            # Non-JSON values are kept verbatim for admins only.
            if not is_merchant:
                data[key] = raw
            continue

        if is_merchant and isinstance(value, list):
            value = [item for item in value if _belongs_to(item, viewer.id)]
        data[key] = value

    if viewer is not None:
        sessions.mark(viewer.id)
        if activity is not None:
            await activity.emit(
                user_id=viewer.id,
                username=viewer.email,
                code=ActivityCode.EXPORT_BACKUP,
                **actor_context(viewer),
                key_count=len(data),
            )

    logger.info(
        "State exported",
        extra={"key_count": len(data), "user_id": viewer.id if viewer else None},
    )
    return data


def build_backup_zip(data: dict[str, Any], prefix: str = "inventory_data_backup") -> tuple[str, bytes]:
    """One ``<folder>/<key>.json`` file per key. Returns (file name, zip bytes)."""
    stamp = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
    folder = f"{prefix}_{stamp}"

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for key, value in data.items():
            content = value if isinstance(value, str) else json.dumps(value, indent=2, default=str)
            zf.writestr(f"{folder}/{key}.json", content)

    return f"{folder}.zip", buffer.getvalue()


# =====================================================
# RESTORE
# =====================================================
def parse_backup(raw: bytes | str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise InvalidBackupFormatError("Backup file is not valid JSON") from exc

    if not isinstance(data, dict):
        raise InvalidBackupFormatError(
            "Backup must be a JSON object of key/value pairs",
            details={"found": type(data).__name__},
        )
    return data


async def restore_state(
    kv: KeyValueStore,
    raw: bytes | str,
    viewer,
    sessions: BackupSessions = backup_sessions,
    activity: ActivitySink | None = None,
) -> RestoreResult:
    if viewer is not None and not viewer.is_admin:
        raise AppException(403, "Only admins can restore backups", ErrorCode.PERMISSION_DENIED)

    if viewer is None or not sessions.has_backup(viewer.id):
        raise BackupRequiredError()

    data = parse_backup(raw)

    restored: list[str] = []
    skipped: list[str] = []
    errors: dict[str, str] = {}

    for key, value in data.items():
        if key in RESERVED_KEYS:
            skipped.append(key)
            continue
        try:
            await kv.set(key, json.dumps(value))
        except Exception as exc:
            logger.error("Restore failed for key", extra={"key": key, "error": str(exc)})
            errors[key] = str(exc)
            continue
        restored.append(key)

    if activity is not None and restored:
        await activity.emit(
            user_id=viewer.id,
            username=viewer.email,
            code=ActivityCode.RESTORE_BACKUP,
            **actor_context(viewer),
            restored=", ".join(restored),
        )

    logger.info(
        "State restored",
        extra={"restored": len(restored), "skipped": len(skipped), "failed": len(errors), **actor_context(viewer)},
    )
    return RestoreResult(restored=restored, skipped=skipped, errors=errors)


async def get_state(kv: KeyValueStore, key: str) -> Any:
    raw = await kv.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


async def put_state(kv: KeyValueStore, key: str, value: Any) -> None:
    await kv.set(key, json.dumps(value))
