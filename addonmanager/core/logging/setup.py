# addonmanager/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from addonmanager.app.settings import settings, settingsBool
from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter
from .handlers import getConsoleLogHandler

__all__ = [
    "NO_PROPAGATE",
    "configureLogging",
    "getLogger",
]



# Disable propagation from noisy libraries
NO_PROPAGATE = ["asyncio", "concurrent.futures"]



def _suppressFilter() -> RecurringSuppressFilter:
    levelName = str(settings("debug.suppressRecurringMessages.summaryLevel", "INFO")).upper()
    summaryLevel = getattr(logging, levelName, logging.INFO)
    return RecurringSuppressFilter(
        windowSeconds=int(settings("debug.suppressRecurringMessages.windowSeconds", 60)),
        maxPerWindow=int(settings("debug.suppressRecurringMessages.maxPerWindow", 5)),
        summaryLevel=summaryLevel,
    )



def configureLogging() -> None:
    """
    Initiate the global logging configuration.

    Dev:
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG) when debug.logFile is set
      - In-app console buffer (DEBUG)

    Default:
      - Console INFO
      - JSON file log INFO with rotation when debug.logFile is set
      - In-app console buffer INFO
      - Optional recurring suppression (toggle)
    """
    devMode = settingsBool("debug.devModeEnabled", False)
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    handlers: list[logging.Handler] = []

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers.append(consoleHandler)

    logFile = settings("debug.logFile", None)
    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    bufferHandler = getConsoleLogHandler()
    bufferHandler.setLevel(rootLevel)
    bufferHandler.resize(int(settings("debug.consoleBufferSize", 2000)))
    handlers.append(bufferHandler)

    # One filter per handler so each handler counts its own records
    if settingsBool("debug.suppressRecurringMessages.enabled", False):
        for handler in handlers:
            handler.addFilter(_suppressFilter())

    for handler in handlers:
        root.addHandler(handler)



def getLogger(name: str, side: str = "") -> logging.Logger:
    return logging.getLogger(f"{str(side).strip()}.{str(name).strip()}" if str(side).strip() else str(name).strip())
