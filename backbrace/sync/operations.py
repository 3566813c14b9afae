"""Transfer operations between the local tree and the remote storage."""

import logging

from ..storage.base import StorageAdapter
from ..utils import normalize_path

logger = logging.getLogger(__name__)


class SyncOperations:
    """Copies and deletes files on behalf of the sync engine."""

    def __init__(self, local: StorageAdapter, remote: StorageAdapter):
        """Initialize sync operations.

        Args:
            local: Storage holding the tree being mirrored
            remote: Storage receiving the mirror
        """
        self.local = local
        self.remote = remote

    def upload_file(self, path: str) -> None:
        """Copy a local file to the same path on the remote.

        Args:
            path: Relative path of the file
        """
        with self.local.read_stream(path) as stream:
            self.remote.write_stream(path, stream)
        logger.debug("Copied %s to %r", path, self.remote)

    def delete_remote(self, path: str) -> bool:
        """Delete a remote file if it is still there.

        Args:
            path: Relative path of the file

        Returns:
            True if a delete was issued, False if the file was already gone
        """
        if not self.remote.exists(path):
            logger.debug("Remote file already gone: %s", path)
            return False
        self.remote.delete(path)
        return True

    def local_has(self, path: str) -> bool:
        """Check whether a file currently exists in the local tree.

        Remote paths that are not in normalized form (for example keys with
        doubled slashes) can never be produced by the local tree.
        """
        if normalize_path(path) != path:
            return False
        return self.local.exists(path)
