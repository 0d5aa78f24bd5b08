import pytest

from loopcard.record import ProfileRecord
from loopcard.state import PUBLIC_BLOCKED_NOTICE, AppState, Route

from _record_factory import make_complete_record


def test_incomplete_record_starts_in_wizard(empty_state):
    assert empty_state.route is Route.WIZARD


def test_complete_record_skips_onboarding(complete_state):
    assert complete_state.route is Route.DASHBOARD


def test_initial_override_runs_only_once(complete_state):
    complete_state.navigate(Route.WIZARD)
    complete_state.initialize()
    assert complete_state.route is Route.WIZARD


def test_override_not_applied_after_record_becomes_complete(empty_state, complete_record):
    empty_state.commit(complete_record)
    empty_state.initialize()
    assert empty_state.route is Route.WIZARD


def test_navigation_is_explicit(complete_state):
    assert complete_state.go_settings() is Route.SETTINGS
    assert complete_state.go_public() is Route.PUBLIC
    assert complete_state.go_dashboard() is Route.DASHBOARD


def test_public_notice_blocks_incomplete_records(empty_state, complete_state):
    assert empty_state.public_notice == PUBLIC_BLOCKED_NOTICE
    assert complete_state.public_notice is None


def test_update_writes_through(empty_state, store):
    empty_state.update(business_name="Acme", slug="ACME Co")
    reloaded = store.load()
    assert reloaded.business_name == "Acme"
    assert reloaded.slug == "acmeco"


def test_update_rejects_unknown_fields(empty_state):
    with pytest.raises(AttributeError):
        empty_state.update(nickname="x")


def test_commit_mutates_live_record_in_place(empty_state, store):
    live = empty_state.record
    staged = make_complete_record(theme_color="#00ff00")
    empty_state.commit(staged)
    assert empty_state.record is live
    assert live.theme_color == "#00ff00"
    assert store.load() == staged


def test_state_without_loading_is_not_initialized(store):
    state = AppState(record=make_complete_record(), store=store)
    assert state.route is Route.WIZARD
    assert state.initialize() is Route.DASHBOARD
    assert ProfileRecord() != state.record
