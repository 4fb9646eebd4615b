"""Data models for remote store API responses."""

from dataclasses import dataclass
from typing import Any, Optional

from .exceptions import DbxInvalidResponseError
from .utils import parse_timestamp


@dataclass(frozen=True)
class RemoteMetadata:
    """Snapshot of a remote file's metadata.

    Fetched fresh for every sync pair and never reused.
    """

    path: str
    """Remote path the metadata was requested for"""

    exists: bool
    """Whether a file exists at the remote path"""

    content_hash: Optional[str] = None
    """Block-hash fingerprint of the remote content (None if absent)"""

    modified_at: Optional[int] = None
    """Client modification time in epoch seconds (None if absent)"""

    size: Optional[int] = None
    """Size in bytes (None if absent)"""

    rev: Optional[str] = None
    """Remote revision identifier"""

    @classmethod
    def absent(cls, path: str) -> "RemoteMetadata":
        """Build the snapshot for a remote path that does not exist."""
        return cls(path=path, exists=False)

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], path: Optional[str] = None
    ) -> "RemoteMetadata":
        """Build a snapshot from a ``files/get_metadata`` response.

        Args:
            data: Decoded JSON response
            path: Path that was requested (defaults to ``path_display``)

        Returns:
            RemoteMetadata for an existing file

        Raises:
            DbxInvalidResponseError: If the entry is not a file or lacks the
                fields needed for comparison
        """
        if not isinstance(data, dict):
            raise DbxInvalidResponseError(f"Unexpected metadata response: {data!r}")

        remote_path = path or data.get("path_display") or data.get("path_lower") or ""
        tag = data.get(".tag")
        if tag != "file":
            raise DbxInvalidResponseError(
                f"Remote path {remote_path} is a {tag or 'unknown entry'}, not a file"
            )

        content_hash = data.get("content_hash")
        if not isinstance(content_hash, str) or len(content_hash) != 64:
            raise DbxInvalidResponseError(
                f"Missing or invalid content_hash for {remote_path}"
            )

        try:
            modified_at = parse_timestamp(data.get("client_modified", ""))
        except ValueError as e:
            raise DbxInvalidResponseError(
                f"Invalid client_modified for {remote_path}: {e}"
            ) from e

        return cls(
            path=remote_path,
            exists=True,
            content_hash=content_hash.lower(),
            modified_at=modified_at,
            size=data.get("size"),
            rev=data.get("rev"),
        )
