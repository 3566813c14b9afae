"""Exclusion rules for the file mirror."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from ..models import FileEntry
from ..utils import DEFAULT_EXCLUDES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExclusionRules:
    """Ordered, deduplicated set of substring patterns.

    The built-in defaults always come first, followed by user patterns in
    the order they were configured.
    """

    patterns: tuple[str, ...] = DEFAULT_EXCLUDES

    @classmethod
    def from_patterns(cls, patterns: Optional[Iterable[str]] = None) -> "ExclusionRules":
        """Merge user patterns with the built-in defaults.

        Args:
            patterns: User-configured patterns (empty strings are ignored)

        Returns:
            ExclusionRules instance

        Examples:
            >>> ExclusionRules.from_patterns(["cache", ".DS_Store"]).patterns
            ('.DS_Store', 'cache')
        """
        merged: list[str] = []
        for pattern in (*DEFAULT_EXCLUDES, *(patterns or ())):
            if pattern and pattern not in merged:
                merged.append(pattern)
        return cls(tuple(merged))

    def match(self, path: str) -> Optional[str]:
        """Return the first pattern occurring anywhere in ``path``, if any.

        Matching is a plain substring test on the whole relative path, so
        ``build`` matches ``build/out.o`` as well as ``src/rebuild.sh``.
        """
        for pattern in self.patterns:
            if pattern in path:
                return pattern
        return None


class ExclusionFilter:
    """Applies exclusion rules and counts excluded entries.

    One filter is used per pass; each excluded path is counted once no matter
    how often it is checked.
    """

    def __init__(self, rules: ExclusionRules):
        self.rules = rules
        self.excluded_paths: set[str] = set()

    def is_excluded(self, entry: FileEntry) -> bool:
        """Check whether an entry is excluded, recording it if so."""
        pattern = self.rules.match(entry.path)
        if pattern is None:
            return False
        if entry.path not in self.excluded_paths:
            logger.debug("Excluding %s (matches %r)", entry.path, pattern)
            self.excluded_paths.add(entry.path)
        return True

    @property
    def excluded_count(self) -> int:
        """Number of distinct excluded paths seen so far."""
        return len(self.excluded_paths)
