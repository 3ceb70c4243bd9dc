# addonmanager/packs/persister.py
from __future__ import annotations
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from addonmanager.core.errors import PersistError, PersistFailures
from addonmanager.packs.order_store import saveOrder
from addonmanager.packs.types import ManifestRecord, OrderEntry, PackKind

logger = logging.getLogger(__name__)

__all__ = ["toOrderEntries", "persistActive"]



def toOrderEntries(active: Sequence[ManifestRecord]) -> list[OrderEntry]:
    """Packs without a valid uuid are skipped; they never match an order entry on load."""
    entries: list[OrderEntry] = []
    for record in active:
        if not record.hasIdentity:
            logger.warning("Pack '%s' has no valid uuid in its manifest and was not saved as active.", record.name)
            continue
        entries.append(OrderEntry(packId=record.id, version=record.version, ordinal=len(entries)))
    return entries



def persistActive(
    active: Mapping[PackKind, Sequence[ManifestRecord]],
    orderFiles: Mapping[PackKind, Path],
) -> None:
    """
    Write each kind's active list to its order file, resource first.

    Every kind is attempted even if an earlier one fails; there is no rollback of a
    write that already succeeded. Failures are collected into PersistFailures.
    """
    errors: list[PersistError] = []
    for kind in (PackKind.RESOURCE, PackKind.BEHAVIOR):
        if kind not in active:
            continue
        try:
            saveOrder(orderFiles[kind], toOrderEntries(active[kind]), category=kind.value)
        except PersistError as err:
            errors.append(err)

    if errors:
        raise PersistFailures(errors)
    logger.info("Active world packs have successfully saved to disk!")
