"""Utility functions for pydbxsync."""

import re
from datetime import datetime, timedelta, timezone

# =============================================================================
# Constants for file operations
# =============================================================================

# Files above this size are uploaded with an upload session (150 MB)
UPLOAD_SESSION_THRESHOLD: int = 150 * 1024 * 1024

# Chunk size for upload sessions (8 MB, must be a multiple of 4 MB)
UPLOAD_CHUNK_SIZE: int = 8 * 1024 * 1024

# Chunk size for streamed downloads
DOWNLOAD_CHUNK_SIZE: int = 1024 * 1024


# =============================================================================
# Timestamp utilities
# =============================================================================

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Range of epoch seconds a timestamp string can carry (years 1 to 9999)
MIN_TIMESTAMP = -62135596800
MAX_TIMESTAMP = 253402300799

_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_timestamp(epoch_seconds: int) -> str:
    """Format integer epoch seconds as the remote store's timestamp string.

    Args:
        epoch_seconds: Seconds since the Unix epoch (UTC)

    Returns:
        Timestamp string like "2015-05-12T15:50:38Z"

    Examples:
        >>> format_timestamp(0)
        '1970-01-01T00:00:00Z'
        >>> format_timestamp(1431445838)
        '2015-05-12T15:50:38Z'
    """
    dt = _EPOCH + timedelta(seconds=int(epoch_seconds))
    # strftime does not zero-pad years below 1000 on every platform
    return f"{dt.year:04d}-" + dt.strftime("%m-%dT%H:%M:%SZ")


def parse_timestamp(timestamp_str: str) -> int:
    """Parse a remote store timestamp string into integer epoch seconds.

    Only whole-second UTC timestamps ("YYYY-MM-DDTHH:MM:SSZ") are accepted,
    which keeps the conversion exact in both directions.

    Args:
        timestamp_str: Timestamp string like "2015-05-12T15:50:38Z"

    Returns:
        Seconds since the Unix epoch

    Raises:
        ValueError: If the string does not match the expected format

    Examples:
        >>> parse_timestamp("1970-01-01T00:00:00Z")
        0
        >>> parse_timestamp("2015-05-12T15:50:38Z")
        1431445838
    """
    if not isinstance(timestamp_str, str) or not _TIMESTAMP_RE.match(timestamp_str):
        raise ValueError(f"Invalid timestamp: {timestamp_str!r}")

    dt = datetime.strptime(timestamp_str, TIMESTAMP_FORMAT).replace(
        tzinfo=timezone.utc
    )
    return (dt - _EPOCH) // timedelta(seconds=1)


# =============================================================================
# Path and size utilities
# =============================================================================


def normalize_remote_path(path: str) -> str:
    """Normalize a remote path to a single leading slash and no trailing slash.

    Examples:
        >>> normalize_remote_path("Documents/notes.txt")
        '/Documents/notes.txt'
        >>> normalize_remote_path("//Documents//notes.txt/")
        '/Documents/notes.txt'
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part]
    return "/" + "/".join(parts)


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
