"""Image helpers: avatar import, QR export and scan verification."""

import base64
import binascii
import io
import os
import re
from enum import Enum
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from loopcard import AVATAR_SIZE
from loopcard.exceptions import ImageImportError

_DATA_URL_RE = re.compile(r"data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)", re.DOTALL)


class VerifyResult(Enum):
    """Result of QR scannability verification."""
    SCANNABLE = "scannable"
    NOT_SCANNABLE = "not_scannable"
    SKIPPED = "skipped"  # pyzbar not installed


def load_avatar(path: str | Path, size: int = AVATAR_SIZE) -> Image.Image:
    """Load an image from disk as a square avatar.

    Args:
        path: Path to the input image file.
        size: Maximum edge length in pixels. Smaller images are not upscaled.

    Returns:
        Center-cropped square PIL Image in RGB mode.

    Raises:
        ImageImportError: If the file doesn't exist or is not a valid image.
    """
    if not os.path.exists(path):
        raise ImageImportError(f"Image not found: {path}")

    try:
        with Image.open(path) as src:
            img = ImageOps.exif_transpose(src)
            img = img.convert("RGB")
    except (OSError, SyntaxError, UnidentifiedImageError) as e:
        raise ImageImportError(f"Could not open image '{path}': {e}") from e

    img = _center_crop_square(img)
    if img.width > size:
        img = img.resize((size, size), Image.LANCZOS)
    return img


def _center_crop_square(img: Image.Image) -> Image.Image:
    """Center-crop an image to a square, preserving aspect ratio."""
    width, height = img.size
    if width == height:
        return img

    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return img.crop((left, top, left + side, top + side))


def image_to_data_url(img: Image.Image) -> str:
    """Encode an image as an inline ``data:image/png;base64`` URL."""
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def avatar_data_url_from_file(path: str | Path, size: int = AVATAR_SIZE) -> str:
    """Read an image file and return it as an embeddable avatar value."""
    return image_to_data_url(load_avatar(path, size=size))


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URL into ``(mime_type, payload)``.

    Raises:
        ValueError: If the value is not a base64 data URL.
    """
    match = _DATA_URL_RE.fullmatch(data_url.strip())
    if not match:
        raise ValueError("Not a base64 data URL.")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return match.group("mime"), payload


def qr_filename(slug: str) -> str:
    """Download filename for a card's QR code."""
    return f"loopcard_{slug or 'card'}.png"


def save_png(img: Image.Image, output_path: str | Path) -> Path:
    """Save an image as PNG, creating parent directories as needed."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(output_path, "PNG")
    return output_path


def verify_qr_scannable(image_path: str | Path) -> tuple[VerifyResult, str | None]:
    """Attempt to decode a QR code from a saved image.

    Uses pyzbar if available, otherwise returns SKIPPED.

    Returns:
        Tuple of (VerifyResult, decoded_data: str | None).
    """
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except ImportError:
        return VerifyResult.SKIPPED, None

    with Image.open(image_path) as img:
        results = pyzbar_decode(img)
    if results:
        return VerifyResult.SCANNABLE, results[0].data.decode("utf-8")
    return VerifyResult.NOT_SCANNABLE, None
