"""Generate QR codes for the card's public URL."""

import base64
import io
import threading
from enum import Enum
from typing import Callable

import qrcode
from PIL import Image

from loopcard import PLACEHOLDER_HANDLE, PUBLIC_URL_BASE, QR_MARGIN, QR_SIZE
from loopcard.logging import get_logger, log_event

LOGGER = get_logger("qr")

# Max bytes at QR version 40, EC level M (byte mode)
MAX_QR_DATA_LENGTH = 2331


def build_public_url(slug: str, base_url: str = PUBLIC_URL_BASE) -> str:
    """Canonical public URL for a slug; empty slugs get a placeholder handle."""
    return f"{base_url.rstrip('/')}/u/{slug or PLACEHOLDER_HANDLE}"


def generate_qr_code(
    data: str,
    size: int = QR_SIZE,
    margin: int = QR_MARGIN,
) -> Image.Image:
    """Generate a black-on-white QR code image.

    Args:
        data: The text or URL to encode in the QR code.
        size: Output image size in pixels (square).
        margin: Quiet zone around the code, in modules.

    Returns:
        PIL Image of the QR code at the specified size.

    Raises:
        ValueError: If the data is empty or exceeds QR code capacity.
    """
    if not data.strip():
        raise ValueError("QR data cannot be empty.")

    size_bytes = len(data.encode("utf-8"))
    if size_bytes > MAX_QR_DATA_LENGTH:
        raise ValueError(
            f"QR data too long ({size_bytes} bytes). "
            f"Maximum is {MAX_QR_DATA_LENGTH} bytes with error correction level M."
        )

    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=margin,
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr_image = qr.make_image(fill_color="black", back_color="white")
    qr_image = qr_image.convert("RGB")
    qr_image = qr_image.resize((size, size), Image.NEAREST)

    return qr_image


def qr_to_png_bytes(qr_image: Image.Image) -> bytes:
    buf = io.BytesIO()
    qr_image.save(buf, format="PNG")
    return buf.getvalue()


def qr_to_data_url(qr_image: Image.Image) -> str:
    """Encode a QR image as an inline ``data:image/png`` URL."""
    encoded = base64.b64encode(qr_to_png_bytes(qr_image)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


# ---------------------------------------------------------------------------
# Background generation
# ---------------------------------------------------------------------------

class QRStatus(Enum):
    """Display state of the dashboard QR area."""
    EMPTY = "empty"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class QRCodeDispatcher:
    """Runs QR generation on worker threads, keeping only the latest result.

    Every :meth:`request` gets a new token. When a worker finishes, its result
    is applied only if its token is still the latest one; results of
    superseded requests are dropped, whatever order the workers finish in.
    """

    def __init__(
        self,
        generate: Callable[[str], Image.Image] | None = None,
        size: int = QR_SIZE,
        margin: int = QR_MARGIN,
    ):
        self._generate = generate or (lambda data: generate_qr_code(data, size=size, margin=margin))
        self._cond = threading.Condition()
        self._latest_token = 0
        self._status = QRStatus.EMPTY
        self._url: str | None = None
        self._image: Image.Image | None = None
        self._error: Exception | None = None

    @property
    def status(self) -> QRStatus:
        with self._cond:
            return self._status

    @property
    def url(self) -> str | None:
        """URL of the latest request."""
        with self._cond:
            return self._url

    @property
    def image(self) -> Image.Image | None:
        with self._cond:
            return self._image

    @property
    def error(self) -> Exception | None:
        with self._cond:
            return self._error

    def request(self, url: str) -> int:
        """Start generating a QR code for ``url`` and return its token."""
        with self._cond:
            self._latest_token += 1
            token = self._latest_token
            self._url = url
            self._image = None
            self._error = None
            self._status = QRStatus.GENERATING

        log_event(LOGGER, "qr_dispatched", {"token": token, "url": url})
        thread = threading.Thread(target=self._run, args=(token, url), daemon=True)
        thread.start()
        return token

    def _run(self, token: int, url: str) -> None:
        try:
            image = self._generate(url)
        except Exception as e:
            LOGGER.warning("QR generation failed for %s: %s", url, e, exc_info=True)
            self.resolve(token, error=e)
            return
        self.resolve(token, image=image)

    def resolve(
        self,
        token: int,
        image: Image.Image | None = None,
        error: Exception | None = None,
    ) -> bool:
        """Apply a finished generation; returns False if it was superseded."""
        with self._cond:
            if token != self._latest_token:
                log_event(LOGGER, "qr_dropped", {"token": token, "latest": self._latest_token})
                return False
            if error is not None:
                self._status = QRStatus.FAILED
                self._error = error
                self._image = None
            else:
                self._status = QRStatus.READY
                self._image = image
            status = self._status
            self._cond.notify_all()

        log_event(LOGGER, "qr_applied", {"token": token, "status": status.value})
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the latest request resolves; False on timeout."""
        with self._cond:
            return self._cond.wait_for(
                lambda: self._status is not QRStatus.GENERATING, timeout=timeout
            )
