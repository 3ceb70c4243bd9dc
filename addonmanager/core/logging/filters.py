# addonmanager/core/logging/filters.py
from __future__ import annotations
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["RecurringSuppressFilter"]



@dataclass(slots=True)
class _Window:
    startedAt: float
    passed: int = 0
    suppressed: int = 0



class RecurringSuppressFilter(logging.Filter):
    """
    Lets at most `maxPerWindow` identical records through per `windowSeconds`.

    A scan over a pack root with many broken or default packs repeats lines like
    "Pack '...' was hidden" with only the pack name changing, so records are keyed
    on the unformatted message template rather than the final text. When a
    window with suppressed records closes, the next matching record is preceded
    by a one-line summary.

    Scanner workers log from threads, hence the lock.
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
            clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)
        self._clock = clock
        self._windows: dict[tuple[str, int, str], _Window] = {}
        self._lock = threading.Lock()

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True

        key = (record.name, record.levelno, str(record.msg))
        now = self._clock()
        closedCount = 0

        with self._lock:
            window = self._windows.get(key)
            if window is None or now - window.startedAt >= self.windowSeconds:
                closedCount = window.suppressed if window is not None else 0
                window = _Window(startedAt=now)
                self._windows[key] = window
            if window.passed >= self.maxPerWindow:
                window.suppressed += 1
                return False
            window.passed += 1

        if closedCount:
            logging.getLogger(record.name).log(
                self.summaryLevel,
                "Suppressed %d repeated logs: %s",
                closedCount,
                key[2],
                extra={"_noRecurringSuppress": True},
            )
        return True
