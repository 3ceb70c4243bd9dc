# addonmanager/packs/mutator.py
from __future__ import annotations
import logging
from collections.abc import Iterable
from typing import TypeVar
from uuid import UUID

from addonmanager.packs.types import ManifestRecord

logger = logging.getLogger(__name__)

__all__ = ["reposition", "transfer"]

T = TypeVar("T")



def reposition(partition: list[T], fromIndex: int, toIndex: int) -> bool:
    """
    Move `partition[fromIndex]` to `toIndex`, shifting the items in between.
    Out-of-range indices leave the list alone and return False.
    """
    size = len(partition)
    if not (0 <= fromIndex < size and 0 <= toIndex < size):
        return False
    if fromIndex == toIndex:
        return True
    item = partition.pop(fromIndex)
    partition.insert(toIndex, item)
    return True



def transfer(
    source: list[ManifestRecord],
    destination: list[ManifestRecord],
    identities: Iterable[UUID],
) -> list[ManifestRecord]:
    """
    Move every record of `source` whose id is in `identities` to the tail of
    `destination`. Moved records keep the relative order they had in `source`.
    Identities not present in `source` are skipped. Returns the moved records.
    """
    wanted = set(identities)
    if not wanted:
        return []

    moved = [record for record in source if record.id in wanted]
    if not moved:
        logger.debug("None of %d requested pack(s) are in the source list", len(wanted))
        return []

    source[:] = [record for record in source if record.id not in wanted]
    destination.extend(moved)
    for record in moved:
        logger.info("Pack: '%s' was moved", record.name)

    skipped = wanted - {record.id for record in moved}
    if skipped:
        logger.debug("Skipped %d pack(s) not found in the source list", len(skipped))
    return moved
