"""Settings editing over a staged copy of the record."""

from pathlib import Path

from loopcard.config import SyncSettings
from loopcard.exceptions import SyncUnavailableError
from loopcard.image_utils import avatar_data_url_from_file
from loopcard.logging import get_logger, log_event
from loopcard.record import ProfileRecord
from loopcard.state import AppState, Route
from loopcard.sync import get_sync_client, sync_notice
from loopcard.validators import is_complete
from loopcard.wizard import FormField

LOGGER = get_logger("editor")

SETTINGS_FIELDS = (
    FormField("business_name", "Business Name", "Business", required=True),
    FormField("full_name", "Full Name", "Your full name", required=True),
    FormField("phone", "Phone", "Phone", required=True),
    FormField("whatsapp", "WhatsApp", "WhatsApp", required=True),
    FormField("email", "Email", "Email", required=True),
    FormField("website", "Website", "Website (optional)"),
    FormField("bio", "Bio", "1-2 lines", required=True, multiline=True),
    FormField("address", "Address", "Optional", multiline=True),
    FormField("slug", "Handle (slug)", "your-handle", required=True),
)


class SettingsEditor:
    """Buffers edits until :meth:`save`; :meth:`cancel` leaves the live record untouched."""

    def __init__(self, state: AppState, sync_settings: SyncSettings | None = None):
        self.state = state
        self.sync_settings = sync_settings or SyncSettings()
        self.staged: ProfileRecord = state.record.model_copy(deep=True)
        self.sync_error: str | None = None

    def set_field(self, name: str, value) -> None:
        if name not in ProfileRecord.field_names():
            raise AttributeError(f"Unknown record field: {name}")
        setattr(self.staged, name, value)

    def import_avatar(self, path: str | Path) -> None:
        self.staged.avatar_image = avatar_data_url_from_file(path)

    def remove_avatar(self) -> None:
        self.staged.avatar_image = ""

    @property
    def dirty(self) -> bool:
        return self.staged != self.state.record

    def can_save(self) -> bool:
        return is_complete(self.staged)

    @property
    def sync_notice(self) -> str | None:
        return sync_notice(self.sync_settings, self.staged.sync_enabled)

    def save(self) -> bool:
        """Commit the staged copy if it is complete. Stays on the settings view.

        The committed record is then pushed to the sync backend when sync is
        on; a refused push is kept in :attr:`sync_error` instead of raising.
        """
        if not self.can_save():
            return False
        self.state.commit(self.staged)
        self.staged = self.state.record.model_copy(deep=True)
        log_event(LOGGER, "settings_saved", {"slug": self.state.record.slug})
        self.sync_error = self._push()
        return True

    def _push(self) -> str | None:
        record = self.state.record
        try:
            client = get_sync_client(self.sync_settings, record.sync_enabled)
            client.push(record)
        except SyncUnavailableError as e:
            LOGGER.warning("Sync skipped: %s", e)
            return str(e)
        log_event(LOGGER, "record_pushed", {"backend": client.name(), "slug": record.slug})
        return None

    def cancel(self) -> Route:
        """Discard the staged copy and go back to the dashboard."""
        self.staged = self.state.record.model_copy(deep=True)
        log_event(LOGGER, "settings_cancelled")
        return self.state.go_dashboard()
