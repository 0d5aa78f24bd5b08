from PIL import Image

from loopcard.app import LoopCardApp
from loopcard.dashboard import INCOMPLETE_NOTICE, Dashboard
from loopcard.qr_generator import QRCodeDispatcher
from loopcard.state import AppState, Route
from loopcard.store import RecordStore


def _scripted(answers):
    answers = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError
    return fake_input


def _app(state, settings, answers, tmp_path, copied=None):
    output = []
    dashboard = Dashboard(
        state,
        QRCodeDispatcher(generate=lambda url: Image.new("RGB", (16, 16), "white")),
        clipboard=(copied.append if copied is not None else lambda _: None),
    )
    app = LoopCardApp(
        state,
        settings,
        dashboard=dashboard,
        input_fn=_scripted(answers),
        output=output.append,
        color=False,
        download_dir=tmp_path,
        spinner=False,
    )
    return app, output


def test_onboarding_session(empty_state, settings, store, tmp_path):
    answers = [
        "n",
        "1", "MVR Farms",
        "2", "Vishnu Vardhan",
        "3", "Vishnu_Vardhan!!",
        "n",
        "1", "+91 90000 00000",
        "2", "+91 90000 11111",
        "3", "vishnu@example.com",
        "n",
        "1", "Fresh produce.",
        "n",
        "f",
        "q",
    ]
    app, output = _app(empty_state, settings, answers, tmp_path)
    assert app.run() == 0

    assert empty_state.route is Route.DASHBOARD
    assert store.load().slug == "vishnuvardhan"
    text = "\n".join(output)
    assert "Fill in the required fields to continue." in text
    assert "Scan to open: http://localhost:5173/u/vishnuvardhan" in text
    assert "QR ready" in text


def test_dashboard_actions(complete_state, settings, tmp_path):
    copied = []
    answers = ["w", "c", "o", "b", "e", "x", "q"]
    app, output = _app(complete_state, settings, answers, tmp_path, copied)
    assert app.run() == 0

    assert (tmp_path / "loopcard_vishnu-vardhan.png").exists()
    assert copied == ["http://localhost:5173/u/vishnu-vardhan"]
    text = "\n".join(output)
    assert "Fresh produce from our farm to your table." in text
    assert "Settings" in text
    assert complete_state.route is Route.DASHBOARD


def test_public_card_blocked_from_dashboard(empty_state, settings, tmp_path):
    empty_state.go_dashboard()
    app, output = _app(empty_state, settings, ["o", "public", "b", "q"], tmp_path)
    app.run()
    text = "\n".join(output)
    assert INCOMPLETE_NOTICE in text
    assert "Complete all required fields to view the public card." in text
    assert empty_state.route is Route.DASHBOARD


def test_settings_save_and_cancel(complete_state, settings, store, tmp_path):
    answers = [
        "settings",
        "1", "MVR Organic Farms",
        "c", "zzz",
        "c", "#0f766e",
        "w",
        "1", "Unsaved name",
        "x",
        "q",
    ]
    app, output = _app(complete_state, settings, answers, tmp_path)
    app.run()

    saved = store.load()
    assert saved.business_name == "MVR Organic Farms"
    assert saved.theme_color == "#0f766e"
    assert complete_state.record.business_name == "MVR Organic Farms"
    text = "\n".join(output)
    assert "Not a hex colour" in text
    assert "✓ Saved" in text
    assert "Unsaved changes discarded." in text


def test_settings_avatar_error_is_reported(complete_state, settings, tmp_path):
    answers = ["settings", "a", str(tmp_path / "missing.png"), "q"]
    app, output = _app(complete_state, settings, answers, tmp_path)
    app.run()
    assert any("ERROR: Image not found" in line for line in output)


def test_unwritable_store_keeps_the_session_alive(settings, tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    state = AppState.load(RecordStore(blocker / "storage.json"))

    answers = ["1", "Acme", "2", "Jo", "q"]
    app, output = _app(state, settings, answers, tmp_path)
    assert app.run() == 0

    assert state.record.business_name == "Acme"
    assert state.record.full_name == "Jo"
    errors = [line for line in output if "ERROR: Could not write store" in line]
    assert len(errors) == 2
    assert output[-1].endswith("No server required.")


def test_download_failure_is_reported(complete_state, settings, tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    app, output = _app(complete_state, settings, ["w", "q"], blocker)
    assert app.run() == 0
    assert any(line.startswith("  ERROR:") for line in output)


def test_settings_save_reports_refused_sync(complete_state, settings, store, tmp_path):
    app, output = _app(complete_state, settings, ["settings", "s", "w", "q"], tmp_path)
    app.run()
    assert store.load().sync_enabled
    assert any("Not synced: Add LOOPCARD_SYNC_URL" in line for line in output)
