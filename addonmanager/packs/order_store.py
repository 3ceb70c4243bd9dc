# addonmanager/packs/order_store.py
from __future__ import annotations
import contextlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from addonmanager.core.errors import OrderFileParseError, PersistError
from addonmanager.packs.types import OrderEntry
from addonmanager.packs.version import PackVersion, parsePackVersion

logger = logging.getLogger(__name__)

__all__ = [
    "OrderFileEntry",
    "loadOrder",
    "saveOrder",
    "dumpOrder",
]



class OrderFileEntry(BaseModel):
    """
    Wire shape of one element of world_resource_packs.json / world_behavior_packs.json:
    `{"pack_id": "<uuid>", "version": [1, 0, 0]}`. Unknown keys are ignored on read.
    """
    model_config = ConfigDict(extra="ignore")

    pack_id: UUID
    version: PackVersion

    @field_validator("version", mode="before")
    @classmethod
    def _parseVersion(cls, value: Any) -> PackVersion:
        if value is None:
            raise ValueError("version is required")
        return parsePackVersion(value)



def _ensureOrderFile(path: Path) -> None:
    if path.exists():
        return
    path.write_text("[]", encoding="utf-8")
    logger.info("Created '%s' as it was not found.", path.name)



def loadOrder(path: Path) -> list[OrderEntry]:
    """
    Read a world order file.

    - Missing file: created as `[]`, returns [].
    - Not UTF-8 JSON, or not a JSON array: OrderFileParseError.
    - Individual bad entries (missing pack_id/version, malformed uuid or version):
      skipped with a warning; the rest of the file still loads.

    Each entry's ordinal is its index in the file's array.
    """
    path = Path(path)
    _ensureOrderFile(path)

    try:
        text = path.read_text(encoding="utf-8-sig")
        data = json.loads(text) if text.strip() else []
    except (ValueError, RecursionError) as err:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting raises RecursionError
        logger.error("Failed to parse order file '%s': %s", path, err)
        raise OrderFileParseError(path, str(err)) from err

    if not isinstance(data, list):
        reason = f"expected a JSON array, got {type(data).__name__}"
        logger.error("Failed to parse order file '%s': %s", path, reason)
        raise OrderFileParseError(path, reason)

    entries: list[OrderEntry] = []
    for ordinal, raw in enumerate(data):
        try:
            parsed = OrderFileEntry.model_validate(raw)
        except ValidationError as err:
            logger.warning(
                "Skipping entry %d in '%s': %s",
                ordinal,
                path.name,
                "; ".join(f"{'.'.join(str(loc) for loc in e['loc']) or '<entry>'}: {e['msg']}" for e in err.errors()),
            )
            continue
        entries.append(OrderEntry(packId=parsed.pack_id, version=parsed.version, ordinal=ordinal))

    logger.info("Loaded %d active pack(s) from '%s'", len(entries), path.name)
    return entries



def dumpOrder(entries: Iterable[OrderEntry]) -> str:
    """Array position is the ordinal; no index field is written."""
    payload = [{"pack_id": str(entry.packId), "version": list(entry.version)} for entry in entries]
    return json.dumps(payload, indent=2)



def saveOrder(path: Path, entries: Iterable[OrderEntry], *, category: str = "pack") -> None:
    """
    Overwrite a world order file with `entries` in iteration order.

    Written to a sibling temp file and swapped in with os.replace, so a failed
    write leaves the previous file untouched. Any OSError becomes PersistError.
    """
    path = Path(path)
    out = dumpOrder(entries)
    tmpPath = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmpPath, "w", encoding="utf-8") as fl:
            fl.write(out)
            fl.write("\n")
        os.replace(tmpPath, path)
    except OSError as err:
        with contextlib.suppress(OSError):
            tmpPath.unlink(missing_ok=True)
        logger.error("Failed to write '%s': %s", path, err)
        raise PersistError(path, category, str(err)) from err
    logger.info("%s has been written to disk.", path.name)
