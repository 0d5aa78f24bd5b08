"""Local key-value persistence for the profile record.

The store is a single JSON file mapping slot names to values. The record
lives in one named slot; reads merge it over defaults and never fail.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loopcard import STORAGE_KEY
from loopcard.exceptions import StoreError
from loopcard.logging import get_logger, log_event
from loopcard.record import MalformedRecordError, ProfileRecord, record_from_storage

LOGGER = get_logger("store")

CORRUPT_SUFFIX = ".corrupt"


class RecordStore:
    """Profile record persisted in one slot of a JSON key-value file."""

    def __init__(self, path: Path | str, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    # ------------------------------------------------------------------
    # Raw slot access
    # ------------------------------------------------------------------

    def _read_slots(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                slots = json.load(f)
        except OSError as e:
            LOGGER.warning("Unreadable store file %s: %s", self.path, e)
            return {}
        except ValueError as e:
            self._quarantine_file(f"invalid JSON: {e}")
            return {}
        if not isinstance(slots, dict):
            self._quarantine_file("top level is not an object")
            return {}
        return slots

    def _quarantine_file(self, reason: str) -> None:
        backup = self.path.with_name(self.path.name + CORRUPT_SUFFIX)
        LOGGER.warning("Moving corrupt store %s to %s (%s)", self.path, backup, reason)
        try:
            os.replace(self.path, backup)
        except OSError as e:
            LOGGER.warning("Could not move corrupt store aside: %s", e)

    def _write_slots(self, slots: dict[str, Any]) -> None:
        """Write all slots atomically (temp file + rename)."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".loopcard_", suffix=".json", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(slots, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StoreError(f"Could not write store '{self.path}': {e}") from e

    def set(self, key: str, value: Any) -> None:
        slots = self._read_slots()
        slots[key] = value
        self._write_slots(slots)

    # ------------------------------------------------------------------
    # Record access
    # ------------------------------------------------------------------

    def load(self) -> ProfileRecord:
        """Load the record, falling back to defaults.

        A malformed payload is copied to ``<key>.corrupt`` before defaults
        are returned, so the user's data is never silently thrown away.
        """
        slots = self._read_slots()
        if self.key not in slots:
            return ProfileRecord()

        raw = slots[self.key]
        try:
            return record_from_storage(raw)
        except MalformedRecordError as e:
            LOGGER.warning("Discarding malformed record in slot %s: %s", self.key, e)
            slots[self.key + CORRUPT_SUFFIX] = raw
            try:
                self._write_slots(slots)
            except StoreError as write_error:
                LOGGER.warning("Could not back up malformed record: %s", write_error)
            return ProfileRecord()

    def save(self, record: ProfileRecord) -> None:
        """Write the record through to its slot.

        Raises:
            StoreError: If the file cannot be written.
        """
        self.set(self.key, record.to_storage())
        log_event(LOGGER, "record_saved", {"slot": self.key, "slug": record.slug})


def default_store_path() -> Path:
    return Path.home() / ".loopcard" / "storage.json"
