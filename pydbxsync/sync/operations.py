"""Sync operations wrapper for the remote metadata and transfer calls."""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from ..api import DbxClient
from ..exceptions import DbxDownloadError, DbxNotFoundError
from ..models import RemoteMetadata

logger = logging.getLogger(__name__)


class SyncOperations:
    """Remote metadata lookups and transfers used by the sync engine."""

    def __init__(self, client: DbxClient):
        """Initialize sync operations.

        Args:
            client: Remote store API client
        """
        self.client = client

    def get_remote_metadata(self, remote_path: str) -> RemoteMetadata:
        """Fetch a fresh metadata snapshot for a remote path.

        A missing remote file is not an error here; it is reported as an
        absent snapshot. Every other failure propagates.

        Args:
            remote_path: Remote file path

        Returns:
            RemoteMetadata (``exists=False`` if nothing is at the path)
        """
        try:
            return self.client.get_metadata(remote_path)
        except DbxNotFoundError:
            logger.debug(f"Remote file {remote_path} does not exist")
            return RemoteMetadata.absent(remote_path)

    def upload_file(
        self,
        local_path: Path,
        remote_path: str,
        client_modified: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        """Upload a local file to remote storage.

        The local modification time is recorded as the remote
        ``client_modified`` so both sides carry the same timestamp afterwards.

        Args:
            local_path: Local file to upload
            remote_path: Remote destination path
            client_modified: Local modification time (epoch seconds)
            progress_callback: Optional progress callback
                function(bytes_uploaded, total_bytes)
        """
        self.client.upload_file(
            file_path=local_path,
            remote_path=remote_path,
            client_modified=client_modified,
            progress_callback=progress_callback,
        )

    def download_file(
        self,
        remote_path: str,
        local_path: Path,
        modified_at: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Path:
        """Download a remote file to local storage.

        Args:
            remote_path: Remote file to download
            local_path: Local path where file should be saved
            modified_at: Remote modification time to apply to the local file
            progress_callback: Optional progress callback
                function(bytes_downloaded, total_bytes)

        Returns:
            Path where file was saved
        """
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DbxDownloadError(
                f"Cannot create directory {local_path.parent}: {e}"
            ) from e

        self.client.download_file(
            remote_path=remote_path,
            output_path=local_path,
            progress_callback=progress_callback,
        )

        if modified_at is not None:
            try:
                os.utime(local_path, (modified_at, modified_at))
            except OSError as e:
                raise DbxDownloadError(
                    f"Downloaded {local_path} but could not set its mtime: {e}"
                ) from e

        return local_path
