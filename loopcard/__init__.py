"""LoopCard — local-first business card builder with a scannable QR code."""

__version__ = "1.0.0"

# Shared constants
APP_NAME = "LoopCard"
STORAGE_KEY = "loopcard_state_v1"
PUBLIC_URL_BASE = "http://localhost:5173"
PLACEHOLDER_HANDLE = "your-handle"
DEFAULT_THEME_COLOR = "#232a3b"
QR_SIZE = 512  # Pixels, square
QR_MARGIN = 2  # Quiet zone in modules
AVATAR_SIZE = 256
