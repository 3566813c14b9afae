"""Utility functions for BackBrace."""

from datetime import date, datetime
from typing import Optional

# =============================================================================
# Constants
# =============================================================================

# Patterns that are always excluded from the file mirror
DEFAULT_EXCLUDES: tuple[str, ...] = (".DS_Store",)

# Date format used in database dump names
DUMP_DATE_FORMAT: str = "%Y-%m-%d"

# Suffix appended to compressed dumps
ZIP_SUFFIX: str = ".zip"


# =============================================================================
# Path utilities
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize a storage path to a relative, slash-separated form.

    Args:
        path: Path using either separator, optionally with a leading slash

    Returns:
        Normalized relative path

    Examples:
        >>> normalize_path("/docs\\\\readme.txt")
        'docs/readme.txt'
        >>> normalize_path("a//b/")
        'a/b'
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part]
    return "/".join(parts)


def join_key(prefix: str, path: str) -> str:
    """Join a key prefix and a relative path.

    Examples:
        >>> join_key("files/", "a.txt")
        'files/a.txt'
        >>> join_key("", "a.txt")
        'a.txt'
    """
    prefix = normalize_path(prefix)
    path = normalize_path(path)
    if not prefix:
        return path
    if not path:
        return prefix
    return f"{prefix}/{path}"


def strip_prefix(prefix: str, key: str) -> Optional[str]:
    """Remove a key prefix, returning None if the key is outside of it.

    Examples:
        >>> strip_prefix("files", "files/a.txt")
        'a.txt'
        >>> strip_prefix("files", "other/a.txt") is None
        True
    """
    prefix = normalize_path(prefix)
    key = normalize_path(key)
    if not prefix:
        return key
    if key == prefix:
        return ""
    if key.startswith(prefix + "/"):
        return key[len(prefix) + 1 :]
    return None


# =============================================================================
# Formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"


def to_timestamp(value: Optional[datetime]) -> float:
    """Convert a datetime returned by a storage backend to a Unix timestamp.

    Naive datetimes are interpreted as local time, as ``datetime.timestamp``
    does. A missing value maps to 0.
    """
    if value is None:
        return 0.0
    return value.timestamp()


def dated_dump_name(database: str, day: date) -> str:
    """Build the file name of a database dump for a given day.

    Examples:
        >>> dated_dump_name("shop", date(2024, 3, 9))
        'shop_2024-03-09.sql'
    """
    return f"{database}_{day.strftime(DUMP_DATE_FORMAT)}.sql"
