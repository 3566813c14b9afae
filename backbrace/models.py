"""Data models shared by the storage backends and the sync engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileEntry:
    """A file or directory found while listing a storage tree.

    Entries are snapshots taken at listing time and are never updated.
    """

    path: str
    """Path relative to the storage root, using forward slashes"""

    is_directory: bool = False
    """Whether the entry is a directory"""

    modified_time: float = 0.0
    """Last modification time (Unix timestamp)"""

    size: int = 0
    """File size in bytes (0 for directories)"""
