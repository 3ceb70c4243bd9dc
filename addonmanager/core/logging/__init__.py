# addonmanager/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, clearLogContext, getLogContext
from .handlers import getConsoleLogHandler
from .setup import configureLogging, getLogger

__all__ = [
    "configureLogging",
    "getLogger",
    "getConsoleLogHandler",
    "setLogContext",
    "clearLogContext",
    "getLogContext",
]
