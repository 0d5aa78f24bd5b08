"""Dashboard: card summary, public URL and its QR code."""

from pathlib import Path
from typing import Callable

import pyperclip

from loopcard import PUBLIC_URL_BASE
from loopcard.image_utils import qr_filename, save_png
from loopcard.logging import get_logger, log_event
from loopcard.qr_generator import QRCodeDispatcher, QRStatus, build_public_url
from loopcard.record import ProfileRecord
from loopcard.state import AppState

LOGGER = get_logger("dashboard")

INCOMPLETE_NOTICE = "Complete all required fields in Wizard/Settings to enable Public Card."
EMPTY_VALUE = "–"


def summary_rows(record: ProfileRecord) -> list[tuple[str, str]]:
    """Label/value pairs for the card summary; website only when set."""
    rows = [
        ("Business", record.business_name),
        ("Name", record.full_name),
        ("Phone", record.phone),
        ("WhatsApp", record.whatsapp),
        ("Email", record.email),
    ]
    if record.website:
        rows.append(("Website", record.website))
    rows.append(("Handle", record.slug))
    return [(label, value or EMPTY_VALUE) for label, value in rows]


class Dashboard:
    """Read-only view of the live record.

    Call :meth:`refresh` whenever the record may have changed; a new QR code
    is requested only when the public URL differs from the last request.
    """

    def __init__(
        self,
        state: AppState,
        dispatcher: QRCodeDispatcher | None = None,
        base_url: str = PUBLIC_URL_BASE,
        clipboard: Callable[[str], None] = pyperclip.copy,
    ):
        self.state = state
        self.dispatcher = dispatcher or QRCodeDispatcher()
        self.base_url = base_url
        self._clipboard = clipboard

    @property
    def public_url(self) -> str:
        return build_public_url(self.state.record.slug, self.base_url)

    @property
    def can_open_public(self) -> bool:
        return self.state.is_complete

    @property
    def notice(self) -> str | None:
        return None if self.can_open_public else INCOMPLETE_NOTICE

    @property
    def qr_status(self) -> QRStatus:
        return self.dispatcher.status

    def refresh(self) -> int | None:
        """Dispatch QR generation if the URL changed; returns the new token."""
        url = self.public_url
        if url == self.dispatcher.url:
            return None
        return self.dispatcher.request(url)

    def retry(self) -> int:
        """Generate the QR code again for the current URL."""
        return self.dispatcher.request(self.public_url)

    def summary(self) -> list[tuple[str, str]]:
        return summary_rows(self.state.record)

    def download(self, directory: str | Path = ".") -> Path | None:
        """Save the QR code as a PNG; does nothing until generation has finished."""
        image = self.dispatcher.image
        if image is None:
            return None
        path = save_png(image, Path(directory) / qr_filename(self.state.record.slug))
        log_event(LOGGER, "qr_downloaded", {"path": str(path)})
        return path

    def copy_url(self) -> bool:
        """Copy the public URL to the clipboard; False if no clipboard is available."""
        url = self.public_url
        try:
            self._clipboard(url)
        except pyperclip.PyperclipException as e:
            LOGGER.warning("Clipboard unavailable: %s", e)
            return False
        log_event(LOGGER, "url_copied", {"url": url})
        return True
