"""Runtime settings for LoopCard, loaded from ``LOOPCARD_*`` environment variables."""

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from loopcard import PUBLIC_URL_BASE, QR_MARGIN, QR_SIZE, STORAGE_KEY
from loopcard.exceptions import ConfigurationError
from loopcard.store import default_store_path


class SyncSettings(BaseSettings):
    """Credentials for the optional cloud sync backend (``LOOPCARD_SYNC_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="LOOPCARD_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    backend: str = Field(default="supabase", description="Registered sync backend name")
    url: str = Field(default="", description="Backend project URL")
    key: str = Field(default="", description="Backend anonymous/public key")

    @property
    def has_credentials(self) -> bool:
        return bool(self.url.strip() and self.key.strip())


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOOPCARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Storage
    store: Path = Field(
        default_factory=default_store_path,
        description="JSON file holding the card record",
    )
    storage_key: str = Field(default=STORAGE_KEY, min_length=1)

    # Public card
    public_url: str = Field(
        default=PUBLIC_URL_BASE,
        min_length=1,
        description="Base URL for public card links, without the /u/<slug> path",
    )

    # QR export
    qr_size: int = Field(default=QR_SIZE, ge=64, le=4096)
    qr_margin: int = Field(default=QR_MARGIN, ge=0, le=20)

    # Optional sync, read from its own LOOPCARD_SYNC_* variables
    sync: SyncSettings = Field(default_factory=SyncSettings)

    @field_validator("public_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("public_url cannot be empty")
        return value

    @field_validator("store")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()


def load_settings(**overrides: Any) -> AppSettings:
    """Build :class:`AppSettings` from the environment plus overrides.

    Overrides whose value is ``None`` are ignored so CLI flags can be passed
    straight through; the rest take precedence over the environment.

    Raises:
        ConfigurationError: If a value fails validation.
    """
    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid LoopCard settings: {e}") from e


__all__ = ["AppSettings", "SyncSettings", "load_settings"]
