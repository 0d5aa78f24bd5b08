"""Profile record model and its persisted schema."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from loopcard import DEFAULT_THEME_COLOR
from loopcard.validators import normalize_hex_color, normalize_slug

SCHEMA_VERSION = 1


class ProfileRecord(BaseModel):
    """The single persisted card record.

    Attribute names are Python style; the aliases are the camelCase keys
    written to storage.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    business_name: str = Field(default="", alias="businessName")
    full_name: str = Field(default="", alias="fullName")
    phone: str = ""
    whatsapp: str = ""
    email: str = ""
    website: str = ""
    bio: str = ""
    address: str = ""
    avatar_image: str = Field(default="", alias="avatarDataUrl")
    slug: str = ""
    theme_color: str = Field(default=DEFAULT_THEME_COLOR, alias="colorHex")
    sync_enabled: bool = Field(default=False, alias="enableSupabase")

    @field_validator("slug", mode="after")
    @classmethod
    def _strip_slug(cls, value: str) -> str:
        return normalize_slug(value)

    @field_validator("theme_color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> str:
        return normalize_hex_color(value, DEFAULT_THEME_COLOR)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(cls.model_fields)

    def assign_from(self, other: "ProfileRecord") -> None:
        """Overwrite every field in place with the values of ``other``."""
        for name in self.field_names():
            setattr(self, name, getattr(other, name))

    def to_storage(self) -> dict[str, Any]:
        """Versioned envelope written to the store."""
        return {
            "schema_version": SCHEMA_VERSION,
            "record": self.model_dump(by_alias=True),
        }


class MalformedRecordError(ValueError):
    """Stored payload could not be turned into a :class:`ProfileRecord`."""


def migrate(payload: Any) -> dict[str, Any]:
    """Upgrade a stored payload to the current envelope.

    Version 0 is the bare record object without an envelope.

    Raises:
        MalformedRecordError: If the payload has an unknown shape or a
            schema version newer than this code understands.
    """
    if not isinstance(payload, dict):
        raise MalformedRecordError(f"expected an object, got {type(payload).__name__}")

    if "schema_version" not in payload:
        payload = {"schema_version": 0, "record": payload}

    version = payload.get("schema_version")
    if not isinstance(version, int) or version < 0:
        raise MalformedRecordError(f"invalid schema_version: {version!r}")
    if version > SCHEMA_VERSION:
        raise MalformedRecordError(
            f"schema_version {version} is newer than supported version {SCHEMA_VERSION}"
        )
    if not isinstance(payload.get("record"), dict):
        raise MalformedRecordError("envelope has no record object")

    if version == 0:
        payload = {"schema_version": 1, "record": dict(payload["record"])}

    return payload


def record_from_storage(payload: Any) -> ProfileRecord:
    """Build a record from a stored payload, filling missing fields with defaults.

    Raises:
        MalformedRecordError: If migration fails or a field has the wrong type.
    """
    envelope = migrate(payload)
    try:
        return ProfileRecord.model_validate(envelope["record"])
    except ValidationError as e:
        raise MalformedRecordError(str(e)) from e
