# addonmanager/core/logging/handlers.py
from __future__ import annotations
from collections import deque
import logging

from .formatters import ConsoleFormatter

__all__ = ["ConsoleLogHandler", "getConsoleLogHandler"]



class ConsoleLogHandler(logging.Handler):
    """
    Keeps the most recent formatted records in memory for the in-app console view.

    - Bounded: oldest lines are dropped once `maxLines` is reached
    - Safe to emit from scanner worker threads (deque append is atomic)
    - snapshot() returns a copy, oldest first
    """
    def __init__(self, *, maxLines: int = 2000):
        super().__init__()
        # If maxLines <= 0, treat as unbounded (deque maxlen=None)
        self._lines: deque[str] = deque(maxlen=maxLines if maxLines and maxLines > 0 else None)
        self.setFormatter(ConsoleFormatter())

    def emit(self, record: logging.LogRecord):
        try:
            line = self.format(record)
        except Exception:
            # Never crash during logging
            line = f"[ERROR] format failed for record from {record.name}"
        self._lines.append(line)

    def resize(self, maxLines: int) -> None:
        self._lines = deque(self._lines, maxlen=maxLines if maxLines and maxLines > 0 else None)

    def snapshot(self) -> list[str]:
        return list(self._lines)

    def clear(self) -> None:
        self._lines.clear()



# Singleton accessor
__consoleHandler = ConsoleLogHandler()



def getConsoleLogHandler() -> ConsoleLogHandler:
    return __consoleHandler
