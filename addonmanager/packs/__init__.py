# addonmanager/packs/__init__.py
from .types import (
    NIL_PACK_ID,
    ManifestRecord,
    OrderEntry,
    PackCategory,
    PackIcon,
    PackKind,
    PartitionName,
)
from .scanner import ScanOptions, parseCandidate, scanPackRoot, scanPackRootAsync, scanPackRoots, scanPackRootsAsync
from .order_store import loadOrder, saveOrder
from .reconcile import Reconciliation, reconcile
from .mutator import reposition, transfer
from .persister import persistActive

__all__ = [
    "NIL_PACK_ID",
    "ManifestRecord",
    "OrderEntry",
    "PackCategory",
    "PackIcon",
    "PackKind",
    "PartitionName",
    "ScanOptions",
    "parseCandidate",
    "scanPackRoot",
    "scanPackRootAsync",
    "scanPackRoots",
    "scanPackRootsAsync",
    "loadOrder",
    "saveOrder",
    "Reconciliation",
    "reconcile",
    "reposition",
    "transfer",
    "persistActive",
]
