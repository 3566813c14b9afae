"""File comparison logic for the mirror."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import FileEntry
from .index import RemoteIndex


class SyncAction(str, Enum):
    """Actions that can be taken for a path."""

    SKIP = "skip"
    """Remote copy is up to date"""

    UPLOAD_NEW = "upload_new"
    """Upload a file that does not exist remotely"""

    UPDATE_EXISTING = "update_existing"
    """Replace a remote file with a newer local one"""

    DELETE_REMOTE = "delete_remote"
    """Delete a remote file that no longer exists locally"""

    @property
    def is_transfer(self) -> bool:
        """Whether this action copies a local file to the remote."""
        return self in (SyncAction.UPLOAD_NEW, SyncAction.UPDATE_EXISTING)


@dataclass
class SyncDecision:
    """Represents a decision about how to mirror a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    local_file: Optional[FileEntry]
    """Local entry (if exists)"""

    remote_file: Optional[FileEntry]
    """Remote entry (if exists)"""

    relative_path: str
    """Relative path of the file"""


class FileComparator:
    """Classifies local files against a remote index.

    Only existence and modification time are compared, at whole-second
    resolution since object stores do not keep sub-second times. Equal
    timestamps are never treated as an update, so re-running on an unchanged
    tree is a no-op.
    """

    def __init__(self, index: RemoteIndex):
        """Initialize file comparator.

        Args:
            index: Remote snapshot to compare against
        """
        self.index = index

    def classify(self, local_file: FileEntry) -> SyncDecision:
        """Determine the action for a single local file.

        Args:
            local_file: Local file entry (must not be a directory)

        Returns:
            SyncDecision for this file

        Raises:
            ValueError: If ``local_file`` is a directory
        """
        if local_file.is_directory:
            raise ValueError(f"Directories are not classified: {local_file.path}")

        path = local_file.path
        remote_file = self.index.lookup(path)

        if remote_file is None:
            return SyncDecision(
                action=SyncAction.UPLOAD_NEW,
                reason="New local file",
                local_file=local_file,
                remote_file=None,
                relative_path=path,
            )

        if int(local_file.modified_time) > int(remote_file.modified_time):
            return SyncDecision(
                action=SyncAction.UPDATE_EXISTING,
                reason="Local file is newer",
                local_file=local_file,
                remote_file=remote_file,
                relative_path=path,
            )

        return SyncDecision(
            action=SyncAction.SKIP,
            reason="File exists and is up to date",
            local_file=local_file,
            remote_file=remote_file,
            relative_path=path,
        )


def classify(local_file: FileEntry, index: RemoteIndex) -> SyncAction:
    """Return the action for ``local_file`` against ``index``."""
    return FileComparator(index).classify(local_file).action
