import os
from pathlib import Path

import pytest
from PIL import Image

from loopcard.config import AppSettings
from loopcard.record import ProfileRecord
from loopcard.state import AppState
from loopcard.store import RecordStore

from _record_factory import make_complete_record


@pytest.fixture
def complete_record() -> ProfileRecord:
    return make_complete_record()


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    return RecordStore(tmp_path / "storage.json")


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(store=tmp_path / "storage.json")


@pytest.fixture
def empty_state(store: RecordStore) -> AppState:
    return AppState.load(store)


@pytest.fixture
def complete_state(store: RecordStore, complete_record: ProfileRecord) -> AppState:
    store.save(complete_record)
    return AppState.load(store)


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    """A 400x200 landscape JPEG."""
    path = tmp_path / "photo.jpg"
    Image.new("RGB", (400, 200), (200, 40, 40)).save(path, "JPEG")
    return path


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch, tmp_path):
    """Keep LOOPCARD_* variables and .env files of the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("LOOPCARD_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
