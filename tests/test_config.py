from pathlib import Path

import pytest

from loopcard import PUBLIC_URL_BASE, QR_SIZE, STORAGE_KEY
from loopcard.config import AppSettings, SyncSettings, load_settings
from loopcard.exceptions import ConfigurationError


def test_defaults():
    settings = load_settings()
    assert settings.public_url == PUBLIC_URL_BASE
    assert settings.qr_size == QR_SIZE
    assert settings.storage_key == STORAGE_KEY
    assert settings.store.name == "storage.json"
    assert not settings.sync.has_credentials


def test_environment_values(tmp_path, monkeypatch):
    monkeypatch.setenv("LOOPCARD_STORE", str(tmp_path / "cards.json"))
    monkeypatch.setenv("LOOPCARD_PUBLIC_URL", "https://cards.example/")
    monkeypatch.setenv("LOOPCARD_QR_SIZE", "300")
    monkeypatch.setenv("LOOPCARD_SYNC_URL", "https://project.example")
    monkeypatch.setenv("LOOPCARD_SYNC_KEY", "anon")

    settings = load_settings()
    assert settings.store == tmp_path / "cards.json"
    assert settings.public_url == "https://cards.example"
    assert settings.qr_size == 300
    assert settings.sync.has_credentials
    assert settings.sync.backend == "supabase"


def test_empty_environment_values_are_ignored(monkeypatch):
    monkeypatch.setenv("LOOPCARD_PUBLIC_URL", "")
    assert load_settings().public_url == PUBLIC_URL_BASE


def test_overrides_win_and_none_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("LOOPCARD_PUBLIC_URL", "https://env.example")
    monkeypatch.setenv("LOOPCARD_STORE", str(tmp_path / "env.json"))

    settings = load_settings(public_url=None, store=tmp_path / "x.json")
    assert settings.public_url == "https://env.example"
    assert settings.store == tmp_path / "x.json"


@pytest.mark.parametrize(
    "name, value",
    [
        ("LOOPCARD_QR_SIZE", "tiny"),
        ("LOOPCARD_QR_SIZE", "10"),
        ("LOOPCARD_QR_MARGIN", "-1"),
        ("LOOPCARD_PUBLIC_URL", "/"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_settings()


def test_sync_settings_read_their_own_prefix(monkeypatch):
    monkeypatch.setenv("LOOPCARD_SYNC_BACKEND", "memory")
    assert SyncSettings().backend == "memory"


def test_store_path_expands_home():
    settings = AppSettings(store=Path("~/cards.json"))
    assert "~" not in str(settings.store)
