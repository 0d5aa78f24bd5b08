"""Four-step intake wizard."""

from dataclasses import dataclass
from pathlib import Path

from loopcard.image_utils import avatar_data_url_from_file
from loopcard.logging import get_logger, log_event
from loopcard.state import AppState, Route
from loopcard.validators import is_complete, is_email_shaped, is_phone_shaped

LOGGER = get_logger("wizard")

FIRST_STEP = 1
LAST_STEP = 4


@dataclass(frozen=True)
class FormField:
    """One input on a form."""

    name: str
    label: str
    placeholder: str = ""
    required: bool = False
    multiline: bool = False


@dataclass(frozen=True)
class WizardStep:
    number: int
    title: str
    fields: tuple[FormField, ...]


STEPS = {
    1: WizardStep(1, "Identity", (
        FormField("business_name", "Business Name", "e.g. MVR Farms / Enzura", required=True),
        FormField("full_name", "Your Name", "e.g. Vishnu Vardhan", required=True),
        FormField("slug", "Card Handle (slug)", "e.g. vishnu-vardhan", required=True),
    )),
    2: WizardStep(2, "Contacts", (
        FormField("phone", "Phone", "e.g. +91 90000 00000", required=True),
        FormField("whatsapp", "WhatsApp", "e.g. +91 90000 00000", required=True),
        FormField("email", "Email", "e.g. you@example.com", required=True),
        FormField("website", "Website", "Optional"),
    )),
    3: WizardStep(3, "About", (
        FormField("bio", "Short Bio (what you offer)", "1-2 lines about your business",
                  required=True, multiline=True),
        FormField("address", "Address", "Optional", multiline=True),
    )),
    4: WizardStep(4, "Avatar (optional)", (
        FormField("avatar_image", "Upload Profile Photo (PNG/JPG)"),
    )),
}


class IntakeWizard:
    """Linear step machine over the live record.

    Field edits go straight into the shared record (and are persisted);
    only forward moves are gated.
    """

    def __init__(self, state: AppState, step: int = FIRST_STEP):
        self.state = state
        self.step = step
        self.done = False

    @property
    def current(self) -> WizardStep:
        return STEPS[self.step]

    def set_field(self, name: str, value: str) -> None:
        self.state.update(**{name: value})

    def import_avatar(self, path: str | Path) -> None:
        """Raises ImageImportError if the file cannot be read."""
        self.state.update(avatar_image=avatar_data_url_from_file(path))

    def remove_avatar(self) -> None:
        self.state.update(avatar_image="")

    def can_continue(self) -> bool:
        """Gate for leaving the current step."""
        r = self.state.record
        if self.step == 1:
            return bool(r.business_name and r.full_name and r.slug)
        if self.step == 2:
            return is_phone_shaped(r.phone) and is_phone_shaped(r.whatsapp) and is_email_shaped(r.email)
        if self.step == 3:
            return bool(r.bio)
        if self.step == 4:
            return True  # avatar optional
        return False

    def can_finish(self) -> bool:
        return self.step == LAST_STEP and is_complete(self.state.record)

    def next(self) -> bool:
        if self.step >= LAST_STEP or not self.can_continue():
            return False
        self.step += 1
        log_event(LOGGER, "wizard_step", {"step": self.step})
        return True

    def back(self) -> bool:
        if self.step <= FIRST_STEP:
            return False
        self.step -= 1
        log_event(LOGGER, "wizard_step", {"step": self.step})
        return True

    def finish(self) -> bool:
        """Leave the wizard for the dashboard if the whole record is complete."""
        if not self.can_finish():
            return False
        self.done = True
        self.state.navigate(Route.DASHBOARD)
        log_event(LOGGER, "wizard_finished", {"slug": self.state.record.slug})
        return True
