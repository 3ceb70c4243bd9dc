# addonmanager/app/session.py
from __future__ import annotations
import asyncio
import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from uuid import UUID

from addonmanager.app.world import (
    checkPackRoot,
    orderFilePath,
    readWorldName,
    validateWorld,
)
from addonmanager.core.errors import PackNotFoundError, SessionNotLoadedError
from addonmanager.core.logging import setLogContext
from addonmanager.packs.mutator import reposition, transfer
from addonmanager.packs.order_store import loadOrder
from addonmanager.packs.persister import persistActive
from addonmanager.packs.reconcile import reconcile
from addonmanager.packs.scanner import ScanOptions, cleanRecords, scanPackRootsAsync
from addonmanager.packs.types import ManifestRecord, OrderEntry, PackKind, PartitionName

logger = logging.getLogger(__name__)

__all__ = ["CategoryState", "ReconciliationSession"]



@dataclass(slots=True)
class CategoryState:
    """Everything known about one pack kind after the last load."""
    all: list[ManifestRecord] = field(default_factory=list)
    active: list[ManifestRecord] = field(default_factory=list)
    inactive: list[ManifestRecord] = field(default_factory=list)
    # Entries from the order file whose pack was not found on disk during the last load
    missing: list[OrderEntry] = field(default_factory=list)



class ReconciliationSession:
    """
    Owns the pack lists for one world.

    Lifecycle:
      1) load() scans both pack roots and reconciles them with the world's order files
      2) callers reposition/transfer packs between the four partitions
      3) persist() writes both active lists back to the world

    A later load() throws away unsaved changes and rebuilds everything from disk.
    """

    def __init__(
        self,
        worldPath: Path,
        resourceRoot: Path,
        behaviorRoot: Path,
        *,
        scanOptions: ScanOptions | None = None,
    ) -> None:
        self.worldPath = Path(worldPath)
        self.packRoots: dict[PackKind, Path] = {
            PackKind.RESOURCE: Path(resourceRoot),
            PackKind.BEHAVIOR: Path(behaviorRoot),
        }
        self.scanOptions = scanOptions
        self.worldName: str | None = None
        self.loaded = False
        self._states: dict[PackKind, CategoryState] = {kind: CategoryState() for kind in PackKind}

    # ----- Loading -----

    @property
    def orderFiles(self) -> dict[PackKind, Path]:
        return {kind: orderFilePath(self.worldPath, kind) for kind in PackKind}

    async def loadAsync(self) -> None:
        # Stays False until every step below has succeeded
        self.loaded = False
        validateWorld(self.worldPath)
        self.worldName = readWorldName(self.worldPath)
        setLogContext(world=self.worldName)
        for kind, root in self.packRoots.items():
            checkPackRoot(root, kind)

        # An unparseable order file aborts the load before anything is scanned
        persisted = {kind: loadOrder(path) for kind, path in self.orderFiles.items()}
        logger.info("Active world pack configurations have been parsed.")

        scanned = await scanPackRootsAsync(
            self.packRoots[PackKind.RESOURCE],
            self.packRoots[PackKind.BEHAVIOR],
            self.scanOptions,
        )

        states: dict[PackKind, CategoryState] = {}
        for kind in PackKind:
            allPacks = cleanRecords(scanned[kind])
            result = reconcile(allPacks, persisted[kind])
            states[kind] = CategoryState(
                all=allPacks,
                active=result.active,
                inactive=result.inactive,
                missing=result.missing,
            )
        self._states = states
        self.loaded = True
        logger.info(
            "World data has been successfully loaded! (%d resource pack(s), %d behavior pack(s))",
            len(states[PackKind.RESOURCE].all),
            len(states[PackKind.BEHAVIOR].all),
        )

    def load(self) -> None:
        asyncio.run(self.loadAsync())

    # ----- Partitions -----

    def state(self, kind: PackKind) -> CategoryState:
        return self._states[kind]

    def partition(self, name: PartitionName) -> list[ManifestRecord]:
        state = self._states[name.kind]
        return state.active if name.isActive else state.inactive

    def allPacks(self, kind: PackKind) -> list[ManifestRecord]:
        return self._states[kind].all

    # ----- Mutations -----

    def reposition(self, name: PartitionName, fromIndex: int, toIndex: int) -> bool:
        moved = reposition(self.partition(name), fromIndex, toIndex)
        if moved and fromIndex != toIndex:
            record = self.partition(name)[toIndex]
            logger.info(
                "Pack: '%s' was moved %s in %s",
                record.name,
                "up" if toIndex < fromIndex else "down",
                name.value,
            )
        return moved

    def moveUp(self, name: PartitionName, index: int) -> bool:
        return self.reposition(name, index, index - 1)

    def moveDown(self, name: PartitionName, index: int) -> bool:
        return self.reposition(name, index, index + 1)

    def transfer(
        self,
        source: PartitionName,
        destination: PartitionName,
        identities: Iterable[UUID],
    ) -> list[ManifestRecord]:
        if source.kind is not destination.kind:
            raise ValueError(f"Cannot move packs from {source.value} to {destination.value}")
        if source is destination:
            return []
        moved = transfer(self.partition(source), self.partition(destination), identities)
        if moved:
            logger.info("%d pack(s) were moved to %s", len(moved), destination.value)
        return moved

    def activate(self, kind: PackKind, identities: Iterable[UUID]) -> list[ManifestRecord]:
        if kind is PackKind.RESOURCE:
            return self.transfer(PartitionName.RESOURCE_INACTIVE, PartitionName.RESOURCE_ACTIVE, identities)
        return self.transfer(PartitionName.BEHAVIOR_INACTIVE, PartitionName.BEHAVIOR_ACTIVE, identities)

    def deactivate(self, kind: PackKind, identities: Iterable[UUID]) -> list[ManifestRecord]:
        if kind is PackKind.RESOURCE:
            return self.transfer(PartitionName.RESOURCE_ACTIVE, PartitionName.RESOURCE_INACTIVE, identities)
        return self.transfer(PartitionName.BEHAVIOR_ACTIVE, PartitionName.BEHAVIOR_INACTIVE, identities)

    # ----- Disk operations -----

    def persist(self) -> None:
        """
        Raises SessionNotLoadedError when the last load did not complete, and
        PersistFailures if either order file could not be written.
        """
        if not self.loaded:
            logger.error("Refusing to save pack order for '%s': world data is not loaded.", self.worldPath)
            raise SessionNotLoadedError(f"World '{self.worldPath}' has not been loaded successfully")
        persistActive(
            {kind: state.active for kind, state in self._states.items()},
            self.orderFiles,
        )

    def deletePack(self, kind: PackKind, sourcePath: Path) -> ManifestRecord:
        """
        Permanently delete a pack folder and forget it in every partition.

        Raises PackNotFoundError when the folder is already gone or is not a known pack.
        OSErrors from the delete itself propagate; the lists are left untouched then.
        """
        sourcePath = Path(sourcePath)
        state = self._states[kind]
        record = next((rec for rec in state.all if rec.sourcePath == sourcePath), None)
        if record is None:
            raise PackNotFoundError(f"No {kind.value} pack is loaded from '{sourcePath}'")

        if not sourcePath.is_dir():
            logger.warning("Directory for pack '%s' not found. It was likely removed manually.", record.name)
            raise PackNotFoundError(f"Directory '{sourcePath}' does not exist")

        try:
            shutil.rmtree(sourcePath)
        except OSError as err:
            logger.error("Failed to delete pack '%s'. Error: %s", record.name, err)
            raise

        for packs in (state.all, state.active, state.inactive):
            packs[:] = [rec for rec in packs if rec.sourcePath != sourcePath]
        logger.info("Pack '%s' was deleted from the disk!", record.name)
        return record

    # ----- Diagnostics -----

    def checkInvariants(self) -> None:
        """Active and inactive must split `all` exactly, per kind."""
        for kind, state in self._states.items():
            activeIds = {id(record) for record in state.active}
            inactiveIds = {id(record) for record in state.inactive}
            allIds = {id(record) for record in state.all}
            if activeIds & inactiveIds:
                raise AssertionError(f"{kind.value}: a pack is both active and inactive")
            if activeIds | inactiveIds != allIds:
                raise AssertionError(f"{kind.value}: active + inactive does not match the scanned packs")
            if len(state.active) + len(state.inactive) != len(state.all):
                raise AssertionError(f"{kind.value}: a pack appears twice in a partition")
