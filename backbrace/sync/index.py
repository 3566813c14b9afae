"""Snapshot of the remote namespace used for one run."""

import logging
from collections.abc import Iterator
from typing import Optional

from ..models import FileEntry
from ..storage.base import StorageAdapter
from ..utils import normalize_path

logger = logging.getLogger(__name__)


class RemoteIndex:
    """Mapping of remote paths to their entries.

    Paths are kept exactly as the storage reports them, so two objects whose
    keys only differ in redundant separators stay distinct.

    The index is built from a single recursive listing and never refreshed;
    every decision of a run observes the same snapshot.
    """

    def __init__(self, entries: dict[str, FileEntry]):
        self._entries = entries

    @classmethod
    def build(cls, storage: StorageAdapter) -> "RemoteIndex":
        """List the whole remote namespace once and index it by path.

        Args:
            storage: Remote storage adapter

        Returns:
            RemoteIndex snapshot
        """
        entries = {
            entry.path: entry for entry in storage.list_contents("", recursive=True)
        }
        logger.debug("Indexed %d remote entries from %r", len(entries), storage)
        return cls(entries)

    def lookup(self, path: str) -> Optional[FileEntry]:
        """Return the remote entry at ``path``, or None if absent."""
        return self._entries.get(normalize_path(path))

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def files(self) -> list[FileEntry]:
        """Non-directory entries, in listing order."""
        return [entry for entry in self._entries.values() if not entry.is_directory]


class RemoteIndexCache:
    """Builds each storage's index at most once.

    Repeated requests for the same storage return the same RemoteIndex
    instance instead of issuing a new listing.
    """

    def __init__(self) -> None:
        self._indexes: dict[int, tuple[StorageAdapter, RemoteIndex]] = {}

    def get(self, storage: StorageAdapter) -> RemoteIndex:
        cached = self._indexes.get(id(storage))
        if cached is not None:
            return cached[1]
        index = RemoteIndex.build(storage)
        # Keep a reference to the storage so its id cannot be reused
        self._indexes[id(storage)] = (storage, index)
        return index

    def clear(self) -> None:
        self._indexes.clear()
