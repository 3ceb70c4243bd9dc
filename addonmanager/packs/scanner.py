# addonmanager/packs/scanner.py
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import json5
from pydantic import ValidationError

from addonmanager.app.settings import settings, settingsBool
from addonmanager.core.logging import setLogContext
from addonmanager.packs.manifest import BedrockManifest, stripFormattingCodes
from addonmanager.packs.types import ManifestRecord, PackIcon, PackKind

logger = logging.getLogger(__name__)

__all__ = [
    "FALLBACK_ICON_PATH",
    "PNG_SIGNATURE",
    "ScanOptions",
    "fallbackIcon",
    "loadIcon",
    "parseCandidate",
    "cleanRecords",
    "scanPackRoot",
    "scanPackRootAsync",
    "scanPackRoots",
    "scanPackRootsAsync",
]


FALLBACK_ICON_PATH = Path(__file__).resolve().parent.parent / "assets" / "pack_icon_fallback.png"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"



@dataclass(slots=True)
class ScanOptions:
    """
    File names and worker bound used while scanning. Unset fields are filled from settings.
    """
    manifestFileName: str | None = None
    iconFileName: str | None = None
    maxWorkers: int | None = None

    def __post_init__(self) -> None:
        if not self.manifestFileName:
            self.manifestFileName = str(settings("packs.manifestFileName", "manifest.json"))
        if not self.iconFileName:
            self.iconFileName = str(settings("packs.iconFileName", "pack_icon.png"))
        self.maxWorkers = max(1, int(self.maxWorkers or settings("scan.maxWorkers", 8)))



# ------------------------------------------------------------------ #
# Icons
# ------------------------------------------------------------------ #

@lru_cache(maxsize=1)
def fallbackIcon() -> PackIcon:
    """Shared fallback image; every pack without a usable icon gets this same instance."""
    try:
        data = FALLBACK_ICON_PATH.read_bytes()
    except OSError as err:
        logger.error("Fallback pack icon '%s' could not be read: %s", FALLBACK_ICON_PATH, err)
        data = b""
    return PackIcon(data=data, sourcePath=FALLBACK_ICON_PATH, isFallback=True)



def loadIcon(iconPath: Path, *, packName: str) -> PackIcon:
    """
    Never raises. A missing icon is normal and falls back quietly; an unreadable
    or non-PNG icon falls back with a warning.
    """
    try:
        data = iconPath.read_bytes()
    except FileNotFoundError:
        logger.debug("No pack icon for '%s', using fallback", packName)
        return fallbackIcon()
    except OSError as err:
        logger.warning("Could not load pack icon for '%s'. Using fallback. (%s)", packName, err)
        return fallbackIcon()

    if not data.startswith(PNG_SIGNATURE):
        logger.warning("Pack icon for '%s' is not a PNG image. Using fallback.", packName)
        return fallbackIcon()
    return PackIcon(data=data, sourcePath=iconPath, isFallback=False)



# ------------------------------------------------------------------ #
# Single candidate
# ------------------------------------------------------------------ #

def _readManifest(manifestPath: Path) -> Mapping[str, Any]:
    rawJson = json5.loads(manifestPath.read_text(encoding="utf-8-sig"))
    if rawJson is None or not isinstance(rawJson, dict):
        raise TypeError(f"Manifest file '{manifestPath}' is not a JSON object")
    return rawJson



def parseCandidate(packDir: Path, options: ScanOptions | None = None) -> ManifestRecord | None:
    """
    Turn one pack folder into a ManifestRecord, or None when it is not a usable pack.

      - no manifest file          -> None, silently
      - manifest not valid JSON   -> None, error logged
      - manifest without header,
        or fields of wrong types  -> None, warning logged
      - I/O error while reading   -> None, warning logged
    """
    opts = options or ScanOptions()
    manifestPath = packDir / opts.manifestFileName
    if not manifestPath.is_file():
        logger.debug("No %s in '%s', skipping", opts.manifestFileName, packDir)
        return None

    try:
        rawJson = _readManifest(manifestPath)
        manifest = BedrockManifest.model_validate(rawJson)
    except ValidationError as err:
        logger.warning(
            "Invalid manifest file found in '%s'. It was skipped. (%d problem(s): %s)",
            packDir.name,
            err.error_count(),
            "; ".join(f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in err.errors()),
        )
        return None
    except TypeError as err:
        logger.warning("Invalid manifest file found in '%s'. It was skipped. (%s)", packDir.name, err)
        return None
    except ValueError as err:
        # json5 syntax errors and undecodable bytes
        logger.error("Manifest file in '%s' could not be parsed: %s", packDir.name, err)
        return None
    except OSError as err:
        logger.warning("Manifest file in '%s' could not be read: %s", packDir.name, err)
        return None

    header = manifest.header
    icon = loadIcon(packDir / opts.iconFileName, packName=header.name)
    return ManifestRecord(
        sourcePath=packDir,
        id=header.uuid,
        name=header.name,
        description=header.description,
        version=header.version,
        category=manifest.category,
        icon=icon,
    )



def cleanRecords(records: list[ManifestRecord], *, enabled: bool | None = None) -> list[ManifestRecord]:
    """Strip Bedrock formatting codes from names and descriptions."""
    if enabled is None:
        enabled = settingsBool("packs.stripFormattingCodes", True)
    if not enabled:
        logger.info("Pack name cleaning has been disabled.")
        return list(records)
    return [
        replace(
            record,
            name=stripFormattingCodes(record.name),
            description=stripFormattingCodes(record.description),
        )
        for record in records
    ]



# ------------------------------------------------------------------ #
# Pack roots
# ------------------------------------------------------------------ #

def _listCandidates(packRoot: Path) -> list[Path]:
    return [child for child in packRoot.iterdir() if child.is_dir()]



async def scanPackRootAsync(packRoot: Path, options: ScanOptions | None = None) -> list[ManifestRecord]:
    """
    Parse every immediate subdirectory of `packRoot` concurrently.

    Workers push finished records onto a queue; the queue is only drained after
    every worker has finished. The drained records are sorted by folder name
    so results do not depend on worker completion order.
    """
    opts = options or ScanOptions()
    packRoot = Path(packRoot)
    setLogContext(packRoot=packRoot.name)

    if not packRoot.is_dir():
        logger.error("Pack directory not found: %s", packRoot)
        return []

    try:
        candidates = await asyncio.to_thread(_listCandidates, packRoot)
    except OSError as err:
        logger.error("Pack directory '%s' could not be listed: %s", packRoot, err)
        return []

    found: asyncio.Queue[ManifestRecord] = asyncio.Queue()
    gate = asyncio.Semaphore(opts.maxWorkers)

    async def _worker(packDir: Path) -> None:
        async with gate:
            try:
                record = await asyncio.to_thread(parseCandidate, packDir, opts)
            except Exception:
                # One broken candidate must not take its siblings down
                logger.exception("Unexpected failure while scanning '%s'", packDir)
                return
        if record is not None:
            found.put_nowait(record)

    await asyncio.gather(*(_worker(packDir) for packDir in candidates))

    records: list[ManifestRecord] = []
    while not found.empty():
        records.append(found.get_nowait())
    records.sort(key=lambda record: (record.sourcePath.name.lower(), str(record.sourcePath)))

    logger.info("Scanned '%s': %d pack(s) from %d folder(s)", packRoot, len(records), len(candidates))
    return records



def scanPackRoot(packRoot: Path, options: ScanOptions | None = None) -> list[ManifestRecord]:
    return asyncio.run(scanPackRootAsync(packRoot, options))



async def scanPackRootsAsync(
    resourceRoot: Path,
    behaviorRoot: Path,
    options: ScanOptions | None = None,
) -> dict[PackKind, list[ManifestRecord]]:
    """Scan both pack roots concurrently and return only after both are complete."""
    opts = options or ScanOptions()
    resourcePacks, behaviorPacks = await asyncio.gather(
        scanPackRootAsync(resourceRoot, opts),
        scanPackRootAsync(behaviorRoot, opts),
    )
    return {
        PackKind.RESOURCE: resourcePacks,
        PackKind.BEHAVIOR: behaviorPacks,
    }



def scanPackRoots(
    resourceRoot: Path,
    behaviorRoot: Path,
    options: ScanOptions | None = None,
) -> dict[PackKind, list[ManifestRecord]]:
    return asyncio.run(scanPackRootsAsync(resourceRoot, behaviorRoot, options))
