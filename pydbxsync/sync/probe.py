"""Local file probing for sync operations."""

import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import DbxReadError
from ..utils import MAX_TIMESTAMP, MIN_TIMESTAMP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalFile:
    """Represents the state of a local file at probe time."""

    path: Path
    """Path to the file"""

    exists: bool
    """Whether a regular file exists at the path"""

    modified_at: Optional[int] = None
    """Last modification time in whole epoch seconds"""

    size: Optional[int] = None
    """File size in bytes"""

    @classmethod
    def missing(cls, path: Path) -> "LocalFile":
        """Build the state for a path with no file."""
        return cls(path=path, exists=False)


class LocalFileProbe:
    """Reports existence, modification time and size of local files."""

    def probe(self, path: Path) -> LocalFile:
        """Probe a local path.

        Args:
            path: Local path to inspect

        Returns:
            LocalFile describing the path

        Raises:
            DbxReadError: If the path exists but is not a regular file, cannot
                be inspected, or has a modification time outside years 1-9999
        """
        try:
            st = path.stat()
        except FileNotFoundError:
            logger.debug(f"Local file {path} does not exist")
            return LocalFile.missing(path)
        except OSError as e:
            raise DbxReadError(f"Cannot access {path}: {e}") from e

        if not stat.S_ISREG(st.st_mode):
            raise DbxReadError(f"Local path is not a regular file: {path}")

        # Whole seconds only, the remote store has no sub-second precision
        modified_at = int(st.st_mtime)
        if not MIN_TIMESTAMP <= modified_at <= MAX_TIMESTAMP:
            raise DbxReadError(
                f"Modification time of {path} is out of range: {modified_at}"
            )

        return LocalFile(
            path=path,
            exists=True,
            modified_at=modified_at,
            size=st.st_size,
        )
