import json

import pytest

from loopcard.exceptions import StoreError
from loopcard.record import ProfileRecord
from loopcard.store import CORRUPT_SUFFIX, RecordStore


def _slots(store):
    return json.loads(store.path.read_text(encoding="utf-8"))


def test_absent_file_yields_defaults(store):
    assert store.load() == ProfileRecord()
    assert not store.path.exists()


def test_save_writes_versioned_envelope(store, complete_record):
    store.save(complete_record)
    slots = json.loads(store.path.read_text(encoding="utf-8"))
    assert slots[store.key]["schema_version"] == 1
    assert slots[store.key]["record"]["fullName"] == "Vishnu Vardhan"
    assert store.load() == complete_record


def test_legacy_bare_record_loads(store):
    store.path.write_text(
        json.dumps({store.key: {"businessName": "Old Co", "colorHex": "#112233"}}),
        encoding="utf-8",
    )
    record = store.load()
    assert record.business_name == "Old Co"
    assert record.theme_color == "#112233"


def test_malformed_slot_falls_back_and_keeps_backup(store):
    bad = {"schema_version": 1, "record": {"businessName": ["not", "a", "string"]}}
    store.set(store.key, bad)

    assert store.load() == ProfileRecord()
    assert _slots(store)[store.key + CORRUPT_SUFFIX] == bad


def test_invalid_json_file_is_moved_aside(store):
    store.path.write_text("{not json", encoding="utf-8")

    assert store.load() == ProfileRecord()
    backup = store.path.with_name(store.path.name + CORRUPT_SUFFIX)
    assert backup.read_text(encoding="utf-8") == "{not json"
    assert not store.path.exists()


def test_other_slots_survive_a_save(store, complete_record):
    store.set("unrelated", {"keep": True})
    store.save(complete_record)
    assert _slots(store)["unrelated"] == {"keep": True}


def test_unwritable_location_raises_store_error(tmp_path, complete_record):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    store = RecordStore(blocker / "storage.json")
    with pytest.raises(StoreError):
        store.save(complete_record)
