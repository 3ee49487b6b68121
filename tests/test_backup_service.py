import io
import json
import zipfile

import pytest

from warehouse.core.exceptions import AppException, BackupRequiredError, InvalidBackupFormatError
from warehouse.services.admin.backup_service import (
    export_state,
    build_backup_zip,
    restore_state,
    get_state,
    put_state,
)

from fakes import FakeKeyValueStore, FakeActivity


def _seeded_kv():
    return FakeKeyValueStore(
        {
            "theme": json.dumps("dark"),
            "inventory": json.dumps(
                [
                    {"id": "inv-1", "merchantId": "merchant-1"},
                    {"id": "inv-2", "merchantId": "merchant-2"},
                    {"id": "inv-3", "product": {"merchantId": "merchant-1"}},
                    {"id": "inv-4", "owner": "merchant-1"},
                    "merchant-1",
                    None,
                ]
            ),
            "settings": json.dumps({"currency": "INR"}),
            "notes": "plain text, not json",
        }
    )


async def test_export_excludes_theme_and_keeps_raw_text_for_admin(admin, sessions):
    data = await export_state(_seeded_kv(), admin, sessions)

    assert "theme" not in data
    assert data["notes"] == "plain text, not json"
    assert len(data["inventory"]) == 6
    assert data["settings"] == {"currency": "INR"}


async def test_export_filters_arrays_for_merchant(merchant, sessions):
    data = await export_state(_seeded_kv(), merchant, sessions)

    assert [item["id"] for item in data["inventory"]] == ["inv-1", "inv-3", "inv-4"]
    assert "notes" not in data
    assert data["settings"] == {"currency": "INR"}


async def test_export_marks_session_and_logs_activity(merchant, sessions):
    activity = FakeActivity()
    await export_state(_seeded_kv(), merchant, sessions, activity=activity)

    assert sessions.has_backup(merchant.id)
    assert activity.messages[0][0].value == "EXPORT_BACKUP"


async def test_restore_requires_backup_even_for_invalid_file(kv, admin, sessions):
    with pytest.raises(BackupRequiredError) as exc:
        await restore_state(kv, b"not json at all", admin, sessions)
    assert exc.value.status_code == 409


async def test_backup_by_another_user_does_not_count(kv, admin, merchant, sessions):
    await export_state(kv, merchant, sessions)
    with pytest.raises(BackupRequiredError):
        await restore_state(kv, b"{}", admin, sessions)


@pytest.mark.parametrize("raw", [b"not json", b"[1, 2, 3]", b'"text"', b"42"])
async def test_restore_rejects_non_object_backups_before_writing(kv, admin, sessions, raw):
    await export_state(kv, admin, sessions)

    with pytest.raises(InvalidBackupFormatError):
        await restore_state(kv, raw, admin, sessions)
    assert kv.data == {}


async def test_restore_overwrites_keys_and_reports_failures(admin, sessions):
    kv = FakeKeyValueStore({"inventory": json.dumps([])})
    kv.fail_keys.add("broken")
    await export_state(kv, admin, sessions)

    body = json.dumps(
        {"inventory": [{"id": "inv-9"}], "theme": "light", "broken": {"a": 1}, "orders": []}
    )
    result = await restore_state(kv, body, admin, sessions)

    assert result.restored == ["inventory", "orders"]
    assert result.skipped == ["theme"]
    assert "broken" in result.errors
    assert json.loads(kv.data["inventory"]) == [{"id": "inv-9"}]
    assert "theme" not in kv.data


def test_backup_zip_has_one_file_per_key():
    filename, content = build_backup_zip({"inventory": [1, 2], "notes": "raw"})

    assert filename.endswith(".zip")
    with zipfile.ZipFile(io.BytesIO(content)) as zf:
        names = sorted(n.split("/")[-1] for n in zf.namelist())
        assert names == ["inventory.json", "notes.json"]
        folder = zf.namelist()[0].split("/")[0]
        assert json.loads(zf.read(f"{folder}/inventory.json")) == [1, 2]
        assert zf.read(f"{folder}/notes.json") == b"raw"


async def test_state_values_round_trip_as_json(kv):
    await put_state(kv, "cart", {"items": [1]})
    assert kv.data["cart"] == '{"items": [1]}'
    assert await get_state(kv, "cart") == {"items": [1]}
    assert await get_state(kv, "missing") is None


async def test_merchant_cannot_restore_its_filtered_export(merchant, sessions):
    kv = _seeded_kv()
    exported = await export_state(kv, merchant, sessions)

    with pytest.raises(AppException) as exc:
        await restore_state(kv, json.dumps(exported), merchant, sessions)

    assert exc.value.status_code == 403
    assert exc.value.error_code.value == "PERMISSION_DENIED"
    ids = [item["id"] for item in json.loads(kv.data["inventory"]) if isinstance(item, dict)]
    assert "inv-2" in ids
