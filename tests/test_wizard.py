import pytest

from loopcard.exceptions import ImageImportError
from loopcard.state import Route
from loopcard.wizard import LAST_STEP, STEPS, IntakeWizard


def _fill_step1(wizard):
    wizard.set_field("business_name", "MVR Farms")
    wizard.set_field("full_name", "Vishnu Vardhan")
    wizard.set_field("slug", "Vishnu Vardhan")


def _fill_step2(wizard):
    wizard.set_field("phone", "+91 90000 00000")
    wizard.set_field("whatsapp", "+91 90000 11111")
    wizard.set_field("email", "vishnu@example.com")


def test_steps_cover_four_titled_forms():
    assert [STEPS[n].title for n in range(1, 5)] == ["Identity", "Contacts", "About", "Avatar (optional)"]


def test_next_blocked_until_step_one_is_filled(empty_state):
    wizard = IntakeWizard(empty_state)
    assert wizard.step == 1
    assert not wizard.next()
    assert wizard.step == 1

    wizard.set_field("full_name", "Vishnu Vardhan")
    wizard.set_field("slug", "vishnu")
    assert not wizard.next()

    wizard.set_field("business_name", "MVR Farms")
    assert wizard.next()
    assert wizard.step == 2


def test_step_two_requires_contact_shapes(empty_state):
    wizard = IntakeWizard(empty_state)
    _fill_step1(wizard)
    wizard.next()

    wizard.set_field("phone", "123")
    wizard.set_field("whatsapp", "+91 90000 11111")
    wizard.set_field("email", "vishnu@example.com")
    assert not wizard.can_continue()

    wizard.set_field("phone", "+91 90000 00000")
    wizard.set_field("email", "vishnu@")
    assert not wizard.next()

    wizard.set_field("email", "vishnu@example.com")
    assert wizard.next()
    assert wizard.step == 3


def test_back_is_ungated_and_floored(empty_state):
    wizard = IntakeWizard(empty_state, step=3)
    assert wizard.back()
    assert wizard.step == 2
    assert wizard.back()
    assert not wizard.back()
    assert wizard.step == 1


def test_full_walkthrough_reaches_dashboard(empty_state, store):
    wizard = IntakeWizard(empty_state)
    _fill_step1(wizard)
    assert wizard.next()
    _fill_step2(wizard)
    assert wizard.next()
    wizard.set_field("bio", "Fresh produce.")
    assert wizard.next()
    assert wizard.step == LAST_STEP
    assert not wizard.next()

    assert wizard.finish()
    assert wizard.done
    assert empty_state.route is Route.DASHBOARD
    assert store.load().slug == "vishnuvardhan"


def test_finish_requires_global_completeness(empty_state):
    wizard = IntakeWizard(empty_state, step=LAST_STEP)
    assert wizard.can_continue()
    assert not wizard.finish()
    assert not wizard.done
    assert empty_state.route is Route.WIZARD


def test_finish_only_from_last_step(complete_state):
    complete_state.navigate(Route.WIZARD)
    wizard = IntakeWizard(complete_state)
    assert not wizard.finish()
    assert complete_state.route is Route.WIZARD


def test_edits_are_persisted_immediately(empty_state, store):
    wizard = IntakeWizard(empty_state)
    wizard.set_field("business_name", "Acme")
    assert store.load().business_name == "Acme"


def test_avatar_import_and_removal(empty_state, photo):
    wizard = IntakeWizard(empty_state, step=LAST_STEP)
    wizard.import_avatar(photo)
    assert empty_state.record.avatar_image.startswith("data:image/png;base64,")
    wizard.remove_avatar()
    assert empty_state.record.avatar_image == ""


def test_avatar_import_error_leaves_record_untouched(empty_state, tmp_path):
    wizard = IntakeWizard(empty_state, step=LAST_STEP)
    with pytest.raises(ImageImportError):
        wizard.import_avatar(tmp_path / "missing.png")
    assert empty_state.record.avatar_image == ""
