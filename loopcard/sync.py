"""Optional cloud sync integration point.

Sync is off by default and no backend ships with LoopCard. A backend is a
:class:`BaseSyncClient` registered under a name with
:func:`register_sync_backend`; :func:`get_sync_client` only hands one out
when sync is enabled and credentials are configured.
"""

from abc import ABC, abstractmethod
from typing import Callable

from loopcard.config import SyncSettings
from loopcard.exceptions import SyncUnavailableError
from loopcard.logging import get_logger
from loopcard.record import ProfileRecord

LOGGER = get_logger("sync")

MISSING_CREDENTIALS_NOTICE = "Add LOOPCARD_SYNC_URL and LOOPCARD_SYNC_KEY to use sync."


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class BaseSyncClient(ABC):
    """Abstract base class for record sync backends."""

    @abstractmethod
    def push(self, record: ProfileRecord) -> None:
        """Send the current record to the backend.

        Raises:
            SyncUnavailableError: If the backend cannot take the record.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        ...


class DisabledSyncClient(BaseSyncClient):
    """Used whenever sync is switched off. Pushing does nothing."""

    def push(self, record: ProfileRecord) -> None:
        LOGGER.debug("Sync disabled; not pushing %s", record.slug)

    def name(self) -> str:
        return "disabled"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

SyncFactory = Callable[[SyncSettings], BaseSyncClient]

_BACKENDS: dict[str, SyncFactory] = {}


def register_sync_backend(name: str, factory: SyncFactory) -> None:
    _BACKENDS[name] = factory


def unregister_sync_backend(name: str) -> None:
    _BACKENDS.pop(name, None)


def sync_notice(settings: SyncSettings, enabled: bool) -> str | None:
    """User-facing warning when sync is toggled on without credentials."""
    if enabled and not settings.has_credentials:
        return MISSING_CREDENTIALS_NOTICE
    return None


def get_sync_client(settings: SyncSettings, enabled: bool) -> BaseSyncClient:
    """Factory function to get the sync client for the current settings.

    Raises:
        SyncUnavailableError: If sync is enabled but credentials are missing
            or the configured backend is not registered.
    """
    if not enabled:
        return DisabledSyncClient()

    if not settings.has_credentials:
        raise SyncUnavailableError(MISSING_CREDENTIALS_NOTICE)

    factory = _BACKENDS.get(settings.backend)
    if factory is None:
        available = ", ".join(sorted(_BACKENDS)) or "none registered"
        raise SyncUnavailableError(
            f"Unknown sync backend '{settings.backend}'. Available: {available}"
        )
    return factory(settings)
