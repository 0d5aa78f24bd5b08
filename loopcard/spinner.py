"""Terminal spinner shown while a QR code is being generated."""

import sys
import threading
import time
from typing import TextIO


class Spinner:
    """Simple terminal spinner for background operations."""

    FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, message: str = "Generating…", stream: TextIO | None = None):
        self._message = message
        self._stream = stream or sys.stderr
        self._running = threading.Event()
        self._thread: threading.Thread | None = None

    def __enter__(self) -> "Spinner":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def start(self) -> "Spinner":
        self._running.set()
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()
        return self

    def stop(self, final_message: str = "") -> None:
        self._running.clear()
        if self._thread:
            self._thread.join()
            self._thread = None
        # Clear spinner line
        self._stream.write("\r\033[K")
        if final_message:
            self._stream.write(f"  {final_message}\n")
        self._stream.flush()

    def _spin(self) -> None:
        idx = 0
        while self._running.is_set():
            frame = self.FRAMES[idx % len(self.FRAMES)]
            self._stream.write(f"\r  {frame} {self._message}")
            self._stream.flush()
            idx += 1
            time.sleep(0.1)
