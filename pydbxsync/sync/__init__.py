"""Sync engine for pydbxsync - per-file upload/download decisions."""

from .comparator import FileComparator, SyncAction, SyncDecision
from .config import SyncConfigError, load_sync_pairs_from_json
from .engine import SyncEngine, SyncResult, SyncStatus
from .gate import BatchGate, ConfirmationGate, InteractiveGate
from .operations import SyncOperations
from .options import SyncOptions
from .pair import SyncPair, pairs_from_args
from .probe import LocalFile, LocalFileProbe

__all__ = [
    "SyncEngine",
    "SyncResult",
    "SyncStatus",
    "SyncOptions",
    "SyncPair",
    "pairs_from_args",
    "SyncOperations",
    "SyncConfigError",
    "load_sync_pairs_from_json",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "LocalFile",
    "LocalFileProbe",
    "ConfirmationGate",
    "InteractiveGate",
    "BatchGate",
]
