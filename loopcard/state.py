"""Application state and view routing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loopcard.logging import get_logger, log_event
from loopcard.record import ProfileRecord
from loopcard.store import RecordStore
from loopcard.validators import is_complete

LOGGER = get_logger("state")

PUBLIC_BLOCKED_NOTICE = "Complete all required fields to view the public card."


class Route(Enum):
    """Views the application can show."""
    WIZARD = "wizard"
    DASHBOARD = "dashboard"
    PUBLIC = "public"
    SETTINGS = "settings"


# Header navigation, in display order
NAV_ROUTES = (Route.DASHBOARD, Route.PUBLIC, Route.SETTINGS)


@dataclass
class AppState:
    """The live record plus the active route.

    Views receive the state by reference. Every record mutation goes through
    :meth:`update` or :meth:`commit`, which write through to the store.
    """

    record: ProfileRecord
    store: RecordStore
    route: Route = Route.WIZARD
    _initialized: bool = field(default=False, repr=False)

    @classmethod
    def load(cls, store: RecordStore) -> "AppState":
        state = cls(record=store.load(), store=store)
        state.initialize()
        return state

    def initialize(self) -> Route:
        """Skip onboarding when the loaded record is already complete.

        Runs once per state object; later calls are no-ops.
        """
        if self._initialized:
            return self.route
        self._initialized = True
        if self.route is Route.WIZARD and is_complete(self.record):
            self.route = Route.DASHBOARD
            log_event(LOGGER, "route_initial_override", {"route": self.route.value})
        return self.route

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, route: Route) -> Route:
        if route is not self.route:
            log_event(LOGGER, "route_changed", {"from": self.route.value, "to": route.value})
        self.route = route
        return route

    def go_dashboard(self) -> Route:
        return self.navigate(Route.DASHBOARD)

    def go_public(self) -> Route:
        """Show the public card; the view itself blocks incomplete records."""
        return self.navigate(Route.PUBLIC)

    def go_settings(self) -> Route:
        return self.navigate(Route.SETTINGS)

    @property
    def is_complete(self) -> bool:
        return is_complete(self.record)

    @property
    def public_notice(self) -> str | None:
        """Blocking notice for the public view, or None if the card can show."""
        return None if self.is_complete else PUBLIC_BLOCKED_NOTICE

    # ------------------------------------------------------------------
    # Record mutation
    # ------------------------------------------------------------------

    def update(self, **changes: Any) -> ProfileRecord:
        """Set fields on the live record and persist it.

        Raises:
            AttributeError: If a field name is unknown.
        """
        known = ProfileRecord.field_names()
        for name, value in changes.items():
            if name not in known:
                raise AttributeError(f"Unknown record field: {name}")
            setattr(self.record, name, value)
        self.store.save(self.record)
        return self.record

    def commit(self, staged: ProfileRecord) -> ProfileRecord:
        """Replace every field of the live record with ``staged`` and persist."""
        self.record.assign_from(staged)
        self.store.save(self.record)
        log_event(LOGGER, "record_committed", {"slug": self.record.slug})
        return self.record
