"""File comparison logic for sync operations."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from ..hasher import file_content_hash
from ..models import RemoteMetadata
from .probe import LocalFile

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    NONE = "none"
    """Nothing to transfer"""

    UPLOAD = "upload"
    """Upload local file to remote"""

    DOWNLOAD = "download"
    """Download remote file to local"""


REASON_LOCAL_MISSING = "local missing"
REASON_REMOTE_MISSING = "remote missing"
REASON_UNCHANGED = "unchanged"
REASON_REMOTE_NEWER = "remote newer"
REASON_LOCAL_NEWER = "local newer"
REASON_CONFLICT = "conflict"


@dataclass(frozen=True)
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Short human-readable reason for this decision"""

    conflict: bool = False
    """True if content differs but modification times tie"""

    local_hash: Optional[str] = None
    """Content hash of the local file, if it was computed"""


class FileComparator:
    """Decides the sync direction for a local file and its remote counterpart.

    Content hashes are compared before modification times, so a file that
    was touched but not changed is never transferred. Timestamps only pick
    the direction once the content is known to differ.
    """

    def __init__(self, hash_file: Optional[Callable[[Path], str]] = None):
        """Initialize file comparator.

        Args:
            hash_file: Function computing the content hash of a local path
                (defaults to file_content_hash)
        """
        self.hash_file = hash_file or file_content_hash

    def decide(self, local: LocalFile, remote: RemoteMetadata) -> SyncDecision:
        """Decide what to do with one local/remote file pair.

        Args:
            local: Probed state of the local file
            remote: Metadata snapshot of the remote file

        Returns:
            SyncDecision for this pair

        Raises:
            DbxReadError: If the local file cannot be read while hashing
        """
        if not local.exists:
            return SyncDecision(SyncAction.DOWNLOAD, REASON_LOCAL_MISSING)

        if not remote.exists or remote.content_hash is None:
            return SyncDecision(SyncAction.UPLOAD, REASON_REMOTE_MISSING)

        local_hash = self.hash_file(local.path)
        if local_hash == remote.content_hash:
            return SyncDecision(
                SyncAction.NONE, REASON_UNCHANGED, local_hash=local_hash
            )

        logger.debug(
            "Content differs for %s: local %s (mtime %s), remote %s (mtime %s)",
            local.path,
            local_hash,
            local.modified_at,
            remote.content_hash,
            remote.modified_at,
        )

        local_mtime = local.modified_at if local.modified_at is not None else 0
        remote_mtime = remote.modified_at if remote.modified_at is not None else 0

        if local_mtime < remote_mtime:
            return SyncDecision(
                SyncAction.DOWNLOAD, REASON_REMOTE_NEWER, local_hash=local_hash
            )
        if remote_mtime < local_mtime:
            return SyncDecision(
                SyncAction.UPLOAD, REASON_LOCAL_NEWER, local_hash=local_hash
            )

        # Same timestamp, different content: no safe direction to pick
        return SyncDecision(
            SyncAction.NONE, REASON_CONFLICT, conflict=True, local_hash=local_hash
        )
