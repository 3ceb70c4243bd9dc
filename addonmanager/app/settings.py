# addonmanager/app/settings.py
from __future__ import annotations
import json5, os
from pydantic import JsonValue
from pathlib import Path
from typing import Any, cast
from functools import lru_cache

from addonmanager.core.dictpath import getByPath

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS", "USER_SETTINGS_PATH_ENV", "userSettingsPath",
    "loadUserSettings", "loadSettings", "clearSettingsCache",
    "deepMerge", "settings", "settingsBool",
]


USER_SETTINGS_PATH_ENV = "ADDONMANAGER_SETTINGS"

DEFAULT_PACK_PREFIXES = [
    "resourcePack.education",
    "resourcePack.vanilla",
    "behaviorPack.education",
    "behaviorPack.vanilla",
    "experimental",
]

SETTINGS: JsonValue = {
    "__source": "BUILTIN_DEFAULTS",
    "packs": {
        "manifestFileName": "manifest.json",
        "iconFileName": "pack_icon.png",
        "stripFormattingCodes": True,
        "hideDefaultPacks": True,
        "defaultPackPrefixes": DEFAULT_PACK_PREFIXES,
    },
    "scan": {"maxWorkers": 8},
    "world": {
        "resourceOrderFile": "world_resource_packs.json",
        "behaviorOrderFile": "world_behavior_packs.json",
        "levelDatFile": "level.dat",
        "levelNameFile": "levelname.txt",
    },
    "debug": {
        "devModeEnabled": False,
        "logFile": None,
        "consoleBufferSize": 2000,
        "suppressRecurringMessages": {"enabled": False, "windowSeconds": 60, "maxPerWindow": 5, "summaryLevel": "INFO"},
    },
}



def userSettingsPath() -> Path:
    override = os.environ.get(USER_SETTINGS_PATH_ENV)
    if override:
        return Path(override)
    return Path(os.path.expanduser("~/.addonmanager/settings.json5"))



def loadUserSettings() -> JsonValue:
    filePath = userSettingsPath()
    if filePath.exists():
        try:
            data = json5.loads(filePath.read_text(encoding="utf-8"))
        except Exception as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
            return {}
        if not isinstance(data, dict):
            logger.error("Settings file '%s' must contain an object, got %s", filePath, type(data).__name__)
            return {}
        return cast(JsonValue, data)
    return {}



@lru_cache(maxsize=1)
def loadSettings() -> JsonValue:
    return deepMerge(SETTINGS, loadUserSettings())



def clearSettingsCache() -> None:
    loadSettings.cache_clear()



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types (lists, strings, numbers, booleans, null),
    the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = {}
        for key, value in first.items():
            out[key] = cast(JsonValue, value)
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], cast(JsonValue, value))
            else:
                out[key] = cast(JsonValue, value)
        return cast(JsonValue, out)
    
    return cast(JsonValue, second)

# ---------- Ergonomic accessors over merged settings ----------

def settings(path: str, default: Any = None) -> Any:
    """Returns value at `path` from merged settings, or `default` if missing."""
    val = getByPath(loadSettings(), path)
    return default if val is None else val



def settingsBool(path: str, default: bool = False) -> bool:
    """Returns bool value at `path` or `default` if missing."""
    val = getByPath(loadSettings(), path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)
