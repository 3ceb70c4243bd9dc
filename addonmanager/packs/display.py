# addonmanager/packs/display.py
from __future__ import annotations
import logging
from collections.abc import Iterable, Sequence

from addonmanager.app.settings import settings, settingsBool
from addonmanager.packs.types import ManifestRecord, PackKind
from addonmanager.packs.version import formatVersion

logger = logging.getLogger(__name__)

__all__ = [
    "RESOURCE_PACK_NOTE",
    "BEHAVIOR_PACK_NOTE",
    "isDefaultPack",
    "visiblePacks",
    "categoryMismatchNote",
    "formatVersion",
]


RESOURCE_PACK_NOTE = "⚠️ This is a resource pack!"
BEHAVIOR_PACK_NOTE = "⚠️ This is a behavior pack!"



def isDefaultPack(record: ManifestRecord, prefixes: Sequence[str] | None = None) -> bool:
    """Vanilla, education and experimental packs shipped with the server."""
    if prefixes is None:
        prefixes = settings("packs.defaultPackPrefixes", [])
    name = record.name.lower()
    for prefix in prefixes:
        if name.startswith(str(prefix).lower()):
            logger.info("Pack '%s' was hidden. Disable 'packs.hideDefaultPacks' to view.", record.name)
            return True
    return False



def visiblePacks(
    records: Iterable[ManifestRecord],
    *,
    hideDefaults: bool | None = None,
    prefixes: Sequence[str] | None = None,
) -> list[ManifestRecord]:
    """Records a list view should show, in their current order."""
    if hideDefaults is None:
        hideDefaults = settingsBool("packs.hideDefaultPacks", True)
    out: list[ManifestRecord] = []
    for record in records:
        if not record.name:
            continue
        if hideDefaults and isDefaultPack(record, prefixes):
            continue
        out.append(record)
    return out



def categoryMismatchNote(record: ManifestRecord, listKind: PackKind) -> str | None:
    """Warning text for a pack shown in the other kind's list, None when it belongs there."""
    if record.category is None:
        return None
    packKind = record.category.kind
    if packKind is None or packKind == listKind:
        return None
    return RESOURCE_PACK_NOTE if packKind is PackKind.RESOURCE else BEHAVIOR_PACK_NOTE
