"""Sync engine for BackBrace - one-way mirror of a local tree."""

from .comparator import FileComparator, SyncAction, SyncDecision, classify
from .engine import SyncEngine
from .exclusion import ExclusionFilter, ExclusionRules
from .index import RemoteIndex, RemoteIndexCache
from .operations import SyncOperations
from .stats import SyncStats

__all__ = [
    "SyncEngine",
    "SyncOperations",
    "SyncStats",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "classify",
    "ExclusionFilter",
    "ExclusionRules",
    "RemoteIndex",
    "RemoteIndexCache",
]
