"""Line-buffering sink that turns raw subprocess output into log records."""

from __future__ import annotations

import logging
import threading
from typing import Any


class LineTap:
    """Write-only byte sink that logs each completed line.

    Bytes arrive in arbitrary chunks; anything after the last newline is held
    until the next ``write`` or an explicit ``flush``.  Whitespace-only lines
    are dropped.  Every record carries ``tag`` so output from different steps
    can be told apart downstream.

    ``logger`` is anything with a structlog-style ``log(level, event, **kw)``.
    """

    def __init__(self, logger: Any, tag: str, level: int = logging.INFO) -> None:
        self._logger = logger
        self.tag = tag
        self.level = level
        self._buf = bytearray()
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            self._buf.extend(data)
            while True:
                idx = self._buf.find(b"\n")
                if idx < 0:
                    break
                line = self._buf[: idx + 1].decode("utf-8", errors="replace").strip()
                del self._buf[: idx + 1]
                if line:
                    self._logger.log(self.level, line, tag=self.tag)
        return len(data)

    def flush(self) -> None:
        """Emit any buffered text that never got a trailing newline."""
        with self._lock:
            if not self._buf:
                return
            line = self._buf.decode("utf-8", errors="replace")
            self._buf.clear()
            self._logger.log(self.level, line, tag=self.tag, partial=True)

    @property
    def pending(self) -> int:
        """Number of buffered bytes awaiting a newline."""
        with self._lock:
            return len(self._buf)

    def __enter__(self) -> "LineTap":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush()
