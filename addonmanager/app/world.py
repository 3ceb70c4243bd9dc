# addonmanager/app/world.py
from __future__ import annotations
import logging
from pathlib import Path

from addonmanager.app.settings import settings
from addonmanager.core.errors import WorldValidationError
from addonmanager.packs.types import PackKind

logger = logging.getLogger(__name__)

__all__ = [
    "UNKNOWN_WORLD_NAME",
    "UNREADABLE_WORLD_NAME",
    "PACK_ROOT_NAMES",
    "validateWorld",
    "checkPackRoot",
    "detectPackRoots",
    "readWorldName",
    "orderFilePath",
]


UNKNOWN_WORLD_NAME = "Unknown World"
UNREADABLE_WORLD_NAME = "Error Reading Name"

PACK_ROOT_NAMES: dict[PackKind, str] = {
    PackKind.RESOURCE: "resource_packs",
    PackKind.BEHAVIOR: "behavior_packs",
}



def validateWorld(worldPath: Path) -> Path:
    """A world folder is only usable when it holds level.dat."""
    worldPath = Path(worldPath)
    levelDat = str(settings("world.levelDatFile", "level.dat"))
    if not worldPath.is_dir():
        logger.error("World directory '%s' does not exist.", worldPath)
        raise WorldValidationError(f"World directory '{worldPath}' does not exist")
    if not (worldPath / levelDat).is_file():
        logger.error("%s not found in the specified world directory.", levelDat)
        raise WorldValidationError(f"'{levelDat}' not found in world directory '{worldPath}'")
    return worldPath



def checkPackRoot(path: Path, kind: PackKind) -> bool:
    """Warns when the folder is missing or not named like a pack root. Never fails."""
    path = Path(path)
    expected = PACK_ROOT_NAMES[kind]
    if not path.is_dir() or path.name.lower() != expected:
        logger.warning("Invalid %s directory selected: '%s'", expected, path)
        return False
    return True



def detectPackRoots(worldPath: Path) -> dict[PackKind, Path] | None:
    """
    For a dedicated-server layout `<server>/worlds/<world>`, return the server's
    resource_packs and behavior_packs folders when both exist.
    """
    worldPath = Path(worldPath)
    worldsDir = worldPath.parent
    if worldsDir.name.lower() != "worlds":
        return None
    serverRoot = worldsDir.parent
    roots = {kind: serverRoot / name for kind, name in PACK_ROOT_NAMES.items()}
    if all(root.is_dir() for root in roots.values()):
        logger.info("Auto-detected resource and behavior pack paths.")
        return roots
    return None



def readWorldName(worldPath: Path) -> str:
    levelNamePath = Path(worldPath) / str(settings("world.levelNameFile", "levelname.txt"))
    try:
        worldName = levelNamePath.read_text(encoding="utf-8-sig").strip()
    except FileNotFoundError:
        logger.warning("%s not found. Using default name.", levelNamePath.name)
        return UNKNOWN_WORLD_NAME
    except (OSError, UnicodeDecodeError) as err:
        logger.error("Could not read world name from %s. Error: %s", levelNamePath.name, err)
        return UNREADABLE_WORLD_NAME
    logger.info("World name found: %s", worldName)
    return worldName



def orderFilePath(worldPath: Path, kind: PackKind) -> Path:
    key = "world.resourceOrderFile" if kind is PackKind.RESOURCE else "world.behaviorOrderFile"
    default = "world_resource_packs.json" if kind is PackKind.RESOURCE else "world_behavior_packs.json"
    return Path(worldPath) / str(settings(key, default))
