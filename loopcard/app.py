"""Interactive terminal application."""

from pathlib import Path
from typing import Callable

from loopcard import views
from loopcard.config import AppSettings
from loopcard.dashboard import Dashboard
from loopcard.editor import SETTINGS_FIELDS, SettingsEditor
from loopcard.exceptions import ImageImportError, StoreError
from loopcard.qr_generator import QRCodeDispatcher, QRStatus
from loopcard.spinner import Spinner
from loopcard.state import AppState, Route
from loopcard.validators import normalize_hex_color
from loopcard.wizard import IntakeWizard

QR_WAIT_SECONDS = 10.0

# Typed anywhere to jump between views
NAV_COMMANDS = {
    "dashboard": Route.DASHBOARD,
    "public": Route.PUBLIC,
    "settings": Route.SETTINGS,
}
QUIT_COMMANDS = {"q", "quit", "exit"}


class LoopCardApp:
    """Prompt loop over the four views.

    Each pass renders the active route, reads one command and applies it.
    Input and output are injectable so sessions can be scripted.
    """

    def __init__(
        self,
        state: AppState,
        settings: AppSettings,
        dashboard: Dashboard | None = None,
        input_fn: Callable[[str], str] | None = None,
        output: Callable[[str], None] = print,
        color: bool = True,
        download_dir: str | Path = ".",
        spinner: bool = True,
    ):
        self.state = state
        self.settings = settings
        self.dashboard = dashboard or Dashboard(
            state,
            QRCodeDispatcher(size=settings.qr_size, margin=settings.qr_margin),
            base_url=settings.public_url,
        )
        self._input = input_fn or input
        self._out = output
        self._color = color
        self._spinner = spinner
        self.download_dir = Path(download_dir)
        self.wizard: IntakeWizard | None = None
        self.editor: SettingsEditor | None = None
        self._entered: Route | None = None

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> int:
        while True:
            self._enter_route()
            self._out(views.render_header(self.state.route, self.state.record.theme_color, self._color))
            self._out(self._render_current())
            self._out(views.render_footer())
            try:
                command = self._input("> ").strip()
            except EOFError:
                return 0
            if command.lower() in QUIT_COMMANDS:
                return 0
            if command.lower() in NAV_COMMANDS:
                self.state.navigate(NAV_COMMANDS[command.lower()])
                continue
            self._handle(command)

    def _enter_route(self) -> None:
        """Create per-visit helpers when the route changes."""
        route = self.state.route
        if route is self._entered:
            return
        self._entered = route
        if route is Route.WIZARD:
            self.wizard = IntakeWizard(self.state)
        elif route is Route.SETTINGS:
            self.editor = SettingsEditor(self.state, self.settings.sync)

    def _render_current(self) -> str:
        route = self.state.route
        if route is Route.WIZARD:
            return views.render_wizard(self.wizard, self.settings.public_url)
        if route is Route.DASHBOARD:
            self._refresh_qr()
            return views.render_dashboard(self.dashboard)
        if route is Route.PUBLIC:
            body = views.render_public_card(self.state.record, self.settings.public_url)
            return f"{body}\n\n  [b] Back to Dashboard"
        return views.render_settings(self.editor)

    def _refresh_qr(self) -> None:
        self.dashboard.refresh()
        if self.dashboard.qr_status is not QRStatus.GENERATING:
            return
        if self._spinner:
            with Spinner("Generating QR code…"):
                self.dashboard.dispatcher.wait(QR_WAIT_SECONDS)
        else:
            self.dashboard.dispatcher.wait(QR_WAIT_SECONDS)

    def _handle(self, command: str) -> None:
        handlers = {
            Route.WIZARD: self._handle_wizard,
            Route.DASHBOARD: self._handle_dashboard,
            Route.PUBLIC: self._handle_public,
            Route.SETTINGS: self._handle_settings,
        }
        try:
            handlers[self.state.route](command)
        except StoreError as e:
            self._out(f"  ERROR: {e}")
            self._out("  Changes are kept in this session but were not saved.")
        except OSError as e:
            self._out(f"  ERROR: {e}")

    def _ask(self, prompt: str) -> str | None:
        try:
            return self._input(prompt)
        except EOFError:
            return None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def _handle_wizard(self, command: str) -> None:
        wizard = self.wizard
        if command == "n":
            if not wizard.next():
                self._out("  Fill in the required fields to continue.")
        elif command == "b":
            wizard.back()
        elif command == "f":
            if not wizard.finish():
                self._out("  Complete all required fields before finishing.")
        elif command.isdigit() and 1 <= int(command) <= len(wizard.current.fields):
            form_field = wizard.current.fields[int(command) - 1]
            if form_field.name == "avatar_image":
                self._pick_avatar(wizard.import_avatar, wizard.remove_avatar)
                return
            value = self._ask(f"  {form_field.label}: ")
            if value is not None:
                wizard.set_field(form_field.name, value.strip())
        else:
            self._out(f"  Unknown command: {command!r}")

    def _handle_dashboard(self, command: str) -> None:
        dashboard = self.dashboard
        if command == "o":
            if dashboard.can_open_public:
                self.state.go_public()
            else:
                self._out(f"  {dashboard.notice}")
        elif command == "e":
            self.state.go_settings()
        elif command == "w":
            path = dashboard.download(self.download_dir)
            self._out(f"  ✓ Saved: {path}" if path else "  QR code not ready yet.")
        elif command == "c":
            if dashboard.copy_url():
                self._out("  ✓ URL copied")
            else:
                self._out(f"  Clipboard unavailable. URL: {dashboard.public_url}")
        elif command == "r":
            dashboard.retry()
        else:
            self._out(f"  Unknown command: {command!r}")

    def _handle_public(self, command: str) -> None:
        if command == "b":
            self.state.go_dashboard()
        else:
            self._out(f"  Unknown command: {command!r}")

    def _handle_settings(self, command: str) -> None:
        editor = self.editor
        if command == "w":
            if editor.save():
                self._out("  ✓ Saved")
                if editor.sync_error:
                    self._out(f"  ⚠️  Not synced: {editor.sync_error}")
            else:
                self._out("  Complete all required fields before saving.")
        elif command == "x":
            if editor.dirty:
                self._out("  Unsaved changes discarded.")
            editor.cancel()
        elif command == "c":
            value = self._ask("  Theme color (#rrggbb): ")
            if value is not None:
                color = normalize_hex_color(value, "")
                if color:
                    editor.set_field("theme_color", color)
                else:
                    self._out(f"  Not a hex colour; keeping {editor.staged.theme_color}.")
        elif command == "s":
            editor.set_field("sync_enabled", not editor.staged.sync_enabled)
        elif command == "a":
            self._pick_avatar(editor.import_avatar, editor.remove_avatar)
        elif command.isdigit() and 1 <= int(command) <= len(SETTINGS_FIELDS):
            form_field = SETTINGS_FIELDS[int(command) - 1]
            value = self._ask(f"  {form_field.label}: ")
            if value is not None:
                editor.set_field(form_field.name, value.strip())
        else:
            self._out(f"  Unknown command: {command!r}")

    def _pick_avatar(self, import_avatar: Callable[[str], None], remove_avatar: Callable[[], None]) -> None:
        path = self._ask("  Image path (blank to remove): ")
        if path is None:
            return
        path = path.strip()
        if not path:
            remove_avatar()
            return
        try:
            import_avatar(path)
        except ImageImportError as e:
            self._out(f"  ERROR: {e}")
