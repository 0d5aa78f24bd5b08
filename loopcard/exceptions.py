"""Custom exceptions raised by LoopCard."""


class LoopCardError(RuntimeError):
    """Base error for all LoopCard exceptions."""


class ConfigurationError(LoopCardError):
    """Raised when configuration values are invalid or missing."""


class StoreError(LoopCardError):
    """Raised when the local record store cannot be written."""


class ImageImportError(LoopCardError):
    """Raised when an avatar image cannot be read or converted."""


class SyncUnavailableError(LoopCardError):
    """Raised when sync is requested but no usable backend is configured."""
