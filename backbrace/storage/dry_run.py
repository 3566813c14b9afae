"""Storage decorator that simulates mutations."""

import logging
from contextlib import AbstractContextManager
from typing import BinaryIO

from ..models import FileEntry
from .base import StorageAdapter

logger = logging.getLogger(__name__)


class DryRunStorage:
    """Wraps a storage adapter and turns every mutation into a no-op.

    Listing and existence checks are delegated to the wrapped adapter so that
    a dry run computes exactly the same plan as a live run. Simulated
    operations are recorded in ``operations`` as ``(name, path)`` tuples.
    """

    def __init__(self, wrapped: StorageAdapter):
        self.wrapped = wrapped
        self.operations: list[tuple[str, str]] = []

    def __repr__(self) -> str:
        return f"DryRunStorage({self.wrapped!r})"

    def _simulate(self, name: str, path: str) -> None:
        logger.debug("Dry run: skipping %s of %s on %r", name, path, self.wrapped)
        self.operations.append((name, path))

    def list_contents(self, prefix: str = "", recursive: bool = True) -> list[FileEntry]:
        return self.wrapped.list_contents(prefix, recursive)

    def exists(self, path: str) -> bool:
        return self.wrapped.exists(path)

    def get_modified_time(self, path: str) -> float:
        return self.wrapped.get_modified_time(path)

    def read_stream(self, path: str) -> AbstractContextManager[BinaryIO]:
        return self.wrapped.read_stream(path)

    def copy(self, src: str, dst: str) -> None:
        self._simulate("copy", dst)

    def delete(self, path: str) -> None:
        self._simulate("delete", path)

    def write_stream(self, path: str, stream: BinaryIO) -> None:
        self._simulate("write", path)
