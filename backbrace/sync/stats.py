"""Transfer counters."""

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class SyncStats:
    """Counts of excluded, sent and deleted files.

    Each pass returns its own value; values are combined with ``+``.
    """

    excluded: int = 0
    sent: int = 0
    deleted: int = 0

    def __add__(self, other: "SyncStats") -> "SyncStats":
        if not isinstance(other, SyncStats):
            return NotImplemented
        return SyncStats(
            excluded=self.excluded + other.excluded,
            sent=self.sent + other.sent,
            deleted=self.deleted + other.deleted,
        )

    def as_dict(self) -> dict[str, int]:
        """Return the counters as a dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def total_actions(self) -> int:
        """Number of transfers and deletions."""
        return self.sent + self.deleted
