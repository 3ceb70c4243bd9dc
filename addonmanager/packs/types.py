# addonmanager/packs/types.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from uuid import UUID

from addonmanager.packs.version import PackVersion

__all__ = [
    "NIL_PACK_ID",
    "DEFAULT_NAME",
    "DEFAULT_DESCRIPTION",
    "PackKind",
    "PackCategory",
    "PartitionName",
    "PackIcon",
    "ManifestRecord",
    "OrderEntry",
]


# Identity given to manifests with a missing or malformed uuid. Never matches an order entry.
NIL_PACK_ID = UUID(int=0)

DEFAULT_NAME = "Unknown Name"
DEFAULT_DESCRIPTION = "No description."



class PackKind(str, Enum):
    """Which pack root and which world order file a pack belongs to."""
    RESOURCE = "resource"
    BEHAVIOR = "behavior"



class PackCategory(str, Enum):
    """Derived from the type of the first module a manifest declares."""
    RESOURCE = "resource"
    BEHAVIOR_DATA = "behavior-data"
    BEHAVIOR_SCRIPT = "behavior-script"
    UNKNOWN = "unknown"

    @property
    def kind(self) -> PackKind | None:
        if self is PackCategory.RESOURCE:
            return PackKind.RESOURCE
        if self in (PackCategory.BEHAVIOR_DATA, PackCategory.BEHAVIOR_SCRIPT):
            return PackKind.BEHAVIOR
        return None



class PartitionName(str, Enum):
    RESOURCE_ACTIVE = "resource-active"
    RESOURCE_INACTIVE = "resource-inactive"
    BEHAVIOR_ACTIVE = "behavior-active"
    BEHAVIOR_INACTIVE = "behavior-inactive"

    @property
    def kind(self) -> PackKind:
        if self in (PartitionName.RESOURCE_ACTIVE, PartitionName.RESOURCE_INACTIVE):
            return PackKind.RESOURCE
        return PackKind.BEHAVIOR

    @property
    def isActive(self) -> bool:
        return self in (PartitionName.RESOURCE_ACTIVE, PartitionName.BEHAVIOR_ACTIVE)



@dataclass(frozen=True, slots=True)
class PackIcon:
    """
    Opaque image handle: raw PNG bytes plus where they came from.
    Presentation code decodes `data` with whatever toolkit it renders with.
    """
    data: bytes
    sourcePath: Path | None
    isFallback: bool = False

    def __repr__(self) -> str:
        return f"PackIcon(sourcePath={self.sourcePath!r}, size={len(self.data)}, isFallback={self.isFallback})"



@dataclass(frozen=True, slots=True)
class ManifestRecord:
    """
    One discovered pack.
    """
    sourcePath: Path                # Pack folder; authoritative for delete / open folder
    id: UUID                        # header.uuid, NIL_PACK_ID when missing/invalid
    name: str
    description: str
    version: PackVersion            # () when the manifest declares none
    category: PackCategory | None   # None when the manifest declares no modules
    icon: PackIcon | None = None

    @property
    def hasIdentity(self) -> bool:
        return self.id != NIL_PACK_ID



@dataclass(frozen=True, slots=True)
class OrderEntry:
    """
    One element of a world order file. `ordinal` is the element's index in the
    file's array; it is never written back explicitly.
    """
    packId: UUID
    version: PackVersion
    ordinal: int = 0
