"""Core sync engine for mirroring a local tree to remote storage."""

import logging
import time
from typing import Optional

from ..models import FileEntry
from ..output import OutputFormatter
from ..storage.base import StorageAdapter
from .comparator import FileComparator, SyncAction, SyncDecision
from .exclusion import ExclusionFilter, ExclusionRules
from .index import RemoteIndex
from .operations import SyncOperations
from .stats import SyncStats

logger = logging.getLogger(__name__)


class SyncEngine:
    """Mirrors a local tree onto remote storage in one direction.

    A run is an update pass (upload new and newer files) followed by a delete
    pass (prune remote files that no longer exist locally). Both passes use
    the same RemoteIndex. Dry runs are handled by giving the engine a
    ``DryRunStorage`` remote; the engine itself behaves identically.
    """

    def __init__(
        self,
        local: StorageAdapter,
        remote: StorageAdapter,
        rules: Optional[ExclusionRules] = None,
        output: Optional[OutputFormatter] = None,
    ):
        """Initialize sync engine.

        Args:
            local: Storage holding the tree to mirror
            remote: Storage receiving the mirror
            rules: Exclusion rules (defaults only if not given)
            output: Output formatter for displaying progress/status
        """
        self.local = local
        self.remote = remote
        self.rules = rules or ExclusionRules.from_patterns()
        self.output = output or OutputFormatter()
        self.operations = SyncOperations(local, remote)
        self.decisions: list[SyncDecision] = []

    def sync(self, index: RemoteIndex, limit: Optional[int] = None) -> SyncStats:
        """Run the update pass, then the delete pass.

        Args:
            index: Remote snapshot built once for this run
            limit: Only scan the first ``limit`` local entries

        Returns:
            Combined statistics of both passes
        """
        stats = self.run_update_pass(index, limit=limit) + self.run_delete_pass(index)
        logger.debug("Mirror finished with %d remote change(s)", stats.total_actions)
        return stats

    def _list_local(self, limit: Optional[int]) -> list[FileEntry]:
        scan_start = time.time()
        entries = self.local.list_contents("", recursive=True)
        logger.debug(
            "Local scan took %.2fs for %d entries", time.time() - scan_start, len(entries)
        )
        if limit:
            entries = entries[:limit]
        return entries

    def run_update_pass(
        self, index: RemoteIndex, limit: Optional[int] = None
    ) -> SyncStats:
        """Upload local files that are new or newer than their remote copy.

        Excluded entries are counted and skipped before anything else;
        directories are never transferred. An update deletes the stale remote
        object before copying the replacement.

        Args:
            index: Remote snapshot built once for this run
            limit: Only scan the first ``limit`` local entries (listing order);
                None or 0 scans everything

        Returns:
            Statistics of this pass
        """
        stats = SyncStats()
        exclusions = ExclusionFilter(self.rules)
        comparator = FileComparator(index)
        self.decisions = []

        for entry in self._list_local(limit):
            if exclusions.is_excluded(entry):
                self.output.info(f"Excluding file: {entry.path}")
                continue

            if entry.is_directory:
                continue

            decision = comparator.classify(entry)
            self.decisions.append(decision)

            if decision.action == SyncAction.UPLOAD_NEW:
                self.output.info(f"Uploading new file: {entry.path}")
            elif decision.action == SyncAction.UPDATE_EXISTING:
                self.output.info(f"Updating {entry.path}")
                stats += self._delete(entry.path)
            else:
                self.output.info(f"File exists and is up to date: {entry.path}")

            if decision.action.is_transfer:
                stats += self._copy(entry.path)

        return stats + SyncStats(excluded=exclusions.excluded_count)

    def run_delete_pass(self, index: RemoteIndex) -> SyncStats:
        """Delete remote files that no longer exist locally.

        Each remote file is checked against the local storage itself rather
        than a listing, since the update pass ran in between.

        Args:
            index: Remote snapshot built once for this run

        Returns:
            Statistics of this pass
        """
        stats = SyncStats()

        self.output.header("Removing old files")

        for remote_file in index.files:
            if self.operations.local_has(remote_file.path):
                continue

            self.decisions.append(
                SyncDecision(
                    action=SyncAction.DELETE_REMOTE,
                    reason="File deleted locally",
                    local_file=None,
                    remote_file=remote_file,
                    relative_path=remote_file.path,
                )
            )
            self.output.info(f"Deleting file from remote: {remote_file.path}")
            stats += self._delete(remote_file.path)

        return stats

    def _copy(self, path: str) -> SyncStats:
        action_start = time.time()
        self.operations.upload_file(path)
        logger.debug("Upload of %s took %.2fs", path, time.time() - action_start)
        return SyncStats(sent=1)

    def _delete(self, path: str) -> SyncStats:
        self.operations.delete_remote(path)
        return SyncStats(deleted=1)

    def display_summary(self, stats: SyncStats) -> None:
        """Display the counters of a run.

        Args:
            stats: Statistics to display
        """
        self.output.print_summary(
            "Summary",
            [
                (name.capitalize(), f"{count} files")
                for name, count in stats.as_dict().items()
            ],
        )
