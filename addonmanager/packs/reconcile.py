# addonmanager/packs/reconcile.py
from __future__ import annotations
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from uuid import UUID

from addonmanager.packs.types import ManifestRecord, OrderEntry

logger = logging.getLogger(__name__)

__all__ = ["Reconciliation", "buildOrdinalLookup", "reconcile"]



@dataclass(frozen=True, slots=True)
class Reconciliation:
    active: list[ManifestRecord]
    inactive: list[ManifestRecord]
    # Order entries whose pack no longer exists on disk
    missing: list[OrderEntry]



def buildOrdinalLookup(persistedOrder: Iterable[OrderEntry]) -> dict[UUID, int]:
    """identity -> ordinal. A repeated identity keeps its last ordinal."""
    lookup: dict[UUID, int] = {}
    for entry in persistedOrder:
        lookup[entry.packId] = entry.ordinal
    return lookup



def reconcile(allPacks: Sequence[ManifestRecord], persistedOrder: Sequence[OrderEntry]) -> Reconciliation:
    """
    Split the scanned inventory into the world's active packs (in persisted order)
    and everything else (in inventory order).

    The filesystem is ground truth: order entries that match no scanned pack are
    dropped and only reported through `missing`. Pure; same inputs, same output.
    """
    lookup = buildOrdinalLookup(persistedOrder)

    activeWithOrdinal: list[tuple[int, int, ManifestRecord]] = []
    inactive: list[ManifestRecord] = []
    for position, record in enumerate(allPacks):
        ordinal = lookup.get(record.id) if record.hasIdentity else None
        if ordinal is None:
            inactive.append(record)
        else:
            # position breaks ties between packs that share an identity
            activeWithOrdinal.append((ordinal, position, record))

    activeWithOrdinal.sort(key=lambda item: (item[0], item[1]))
    active = [record for _ordinal, _position, record in activeWithOrdinal]

    present = {record.id for record in allPacks if record.hasIdentity}
    missing = [entry for entry in persistedOrder if entry.packId not in present]
    if missing:
        logger.info(
            "%d active pack(s) are listed in the world but were not found on disk and were dropped: %s",
            len(missing),
            ", ".join(str(entry.packId) for entry in missing),
        )

    return Reconciliation(active=active, inactive=inactive, missing=missing)
