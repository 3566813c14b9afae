"""Storage adapter protocol consumed by the sync engine and dump pipeline."""

from contextlib import AbstractContextManager
from typing import BinaryIO, Protocol, runtime_checkable

from ..models import FileEntry


@runtime_checkable
class StorageAdapter(Protocol):
    """Minimal capability interface of a storage backend.

    Paths are relative to the backend's root and use forward slashes.
    Every failure is raised as ``StorageOperationError``.
    """

    def list_contents(self, prefix: str = "", recursive: bool = True) -> list[FileEntry]:
        """List entries below ``prefix``."""
        ...

    def exists(self, path: str) -> bool:
        """Check whether a file exists."""
        ...

    def get_modified_time(self, path: str) -> float:
        """Return the modification time of a file as a Unix timestamp."""
        ...

    def copy(self, src: str, dst: str) -> None:
        """Copy a file within this storage."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file."""
        ...

    def write_stream(self, path: str, stream: BinaryIO) -> None:
        """Write the contents of a binary stream to ``path``."""
        ...

    def read_stream(self, path: str) -> AbstractContextManager[BinaryIO]:
        """Open a file for reading, as a context manager."""
        ...
