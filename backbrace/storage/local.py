"""Local disk storage backend."""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from ..exceptions import StorageOperationError
from ..models import FileEntry
from ..utils import normalize_path

logger = logging.getLogger(__name__)


class LocalStorage:
    """Storage adapter rooted at a local directory.

    Examples:
        >>> storage = LocalStorage("/var/www")
        >>> entries = storage.list_contents()
        >>> storage.exists("index.php")
        True
    """

    def __init__(self, root: Union[str, Path]):
        """Initialize local storage.

        Args:
            root: Root directory; all paths are relative to it
        """
        self.root = Path(root).expanduser()

    def __repr__(self) -> str:
        return f"LocalStorage({str(self.root)!r})"

    def _full_path(self, path: str) -> Path:
        relative = normalize_path(path)
        return self.root / relative if relative else self.root

    def _entry_from_path(self, item: Path) -> FileEntry:
        stat = item.stat()
        is_dir = item.is_dir()
        return FileEntry(
            # Use as_posix() to ensure forward slashes on all platforms
            path=item.relative_to(self.root).as_posix(),
            is_directory=is_dir,
            modified_time=stat.st_mtime,
            size=0 if is_dir else stat.st_size,
        )

    def _scan(self, directory: Path, recursive: bool) -> list[FileEntry]:
        entries: list[FileEntry] = []

        try:
            children = sorted(directory.iterdir())
        except PermissionError as e:
            # Skip directories we can't read
            logger.warning("Skipping unreadable directory %s: %s", directory, e)
            return entries

        for item in children:
            try:
                entry = self._entry_from_path(item)
            except OSError as e:
                # Broken symlinks and files removed while scanning
                logger.debug("Skipping %s: %s", item, e)
                continue
            entries.append(entry)
            if recursive and entry.is_directory:
                entries.extend(self._scan(item, recursive))

        return entries

    def list_contents(self, prefix: str = "", recursive: bool = True) -> list[FileEntry]:
        """List files and directories below ``prefix``.

        Entries are returned in sorted, depth-first order with each directory
        preceding its contents.

        Args:
            prefix: Sub-directory to list (defaults to the root)
            recursive: Whether to descend into sub-directories

        Returns:
            List of FileEntry objects with paths relative to the root
        """
        directory = self._full_path(prefix)
        if not directory.is_dir():
            return []
        return self._scan(directory, recursive)

    def exists(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def get_modified_time(self, path: str) -> float:
        try:
            return self._full_path(path).stat().st_mtime
        except OSError as e:
            raise StorageOperationError(
                f"Cannot read modification time of {path}: {e}", path
            ) from e

    def copy(self, src: str, dst: str) -> None:
        target = self._full_path(dst)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self._full_path(src), target)
        except OSError as e:
            raise StorageOperationError(f"Failed to copy {src} to {dst}: {e}", dst) from e

    def delete(self, path: str) -> None:
        try:
            self._full_path(path).unlink()
        except OSError as e:
            raise StorageOperationError(f"Failed to delete {path}: {e}", path) from e

    def write_stream(self, path: str, stream: BinaryIO) -> None:
        target = self._full_path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as fh:
                shutil.copyfileobj(stream, fh)
        except OSError as e:
            raise StorageOperationError(f"Failed to write {path}: {e}", path) from e

    @contextmanager
    def read_stream(self, path: str) -> Iterator[BinaryIO]:
        try:
            fh = open(self._full_path(path), "rb")
        except OSError as e:
            raise StorageOperationError(f"Failed to open {path}: {e}", path) from e
        with fh:
            yield fh
