from __future__ import annotations

import logging
import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class AuditLog:
    """Append-only, timestamped text log of every deletion event.

    Each ``append`` opens the file, writes one line and fsyncs it before the
    handle is closed. Write failures are reported through ``logging`` and
    never raised.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.path = Path(path)
        self._clock = clock

    def append(self, message: str) -> None:
        line = f"[{self._clock().strftime(TIMESTAMP_FORMAT)}] {message}\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8", errors="backslashreplace") as handle:
                handle.write(line)
                handle.flush()
                os.fsync(handle.fileno())
        except (OSError, ValueError) as exc:
            logger.error("Could not open log file for writing: %s (%s)", self.path, exc)
