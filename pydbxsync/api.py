"""API client for the remote content store (Dropbox API v2 shape)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Iterator

import httpx

from .config import config
from .exceptions import (
    DbxAPIError,
    DbxAuthenticationError,
    DbxConfigError,
    DbxDownloadError,
    DbxInvalidResponseError,
    DbxNetworkError,
    DbxNotFoundError,
    DbxPermissionError,
    DbxRateLimitError,
    DbxReadError,
    DbxUploadError,
)
from .models import RemoteMetadata
from .utils import (
    DOWNLOAD_CHUNK_SIZE,
    UPLOAD_CHUNK_SIZE,
    UPLOAD_SESSION_THRESHOLD,
    format_timestamp,
)

logger = logging.getLogger(__name__)


def _api_arg(arg: dict[str, Any]) -> str:
    """Encode a ``Dropbox-API-Arg`` header value.

    HTTP headers must be ASCII, so every non-ASCII character (and DEL) is
    escaped as ``\\uXXXX``.
    """
    return json.dumps(arg, ensure_ascii=True).replace("\x7f", "\\u007f")


def _error_summary(response: httpx.Response) -> str:
    """Extract the ``error_summary`` from an error response, if any."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() if response.content else ""
    if isinstance(data, dict):
        summary = data.get("error_summary") or data.get("error")
        if summary:
            return str(summary)
    return ""


class DbxClient:
    """Client for interacting with the remote content store API."""

    def __init__(
        self,
        access_token: str | None = None,
        api_url: str | None = None,
        content_url: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize API client.

        Args:
            access_token: Optional access token (uses config if not provided)
            api_url: Optional RPC base URL (uses config if not provided)
            content_url: Optional content base URL (uses config if not provided)
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.access_token = access_token or config.access_token
        self.api_url = (api_url or config.api_url).rstrip("/")
        self.content_url = (content_url or config.content_url).rstrip("/")
        self.timeout = timeout

        if not self.access_token:
            raise DbxConfigError(
                "Access token not configured. "
                "Please set DROPBOX_ACCESS_TOKEN or run 'pydbxsync init'."
            )

        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map an error response to the matching exception.

        Args:
            response: Response whose body has already been read

        Raises:
            DbxAPIError: Or a subclass, if the status code signals an error
        """
        status_code = response.status_code
        if status_code < 400:
            return

        summary = _error_summary(response)

        if status_code == 401:
            raise DbxAuthenticationError("Invalid access token or unauthorized access")
        elif status_code == 403:
            message = "Access forbidden - check your permissions"
            raise DbxPermissionError(f"{message}: {summary}" if summary else message)
        elif status_code == 409 and "not_found" in summary:
            raise DbxNotFoundError(f"Path not found: {summary}")
        elif status_code == 429:
            raise DbxRateLimitError("Rate limit exceeded - please try again later")

        error_msg = f"API request failed with status {status_code}"
        if summary:
            error_msg = f"{error_msg}: {summary}"
        raise DbxAPIError(error_msg)

    def _rpc(self, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        """Call an RPC endpoint with a JSON body.

        Args:
            endpoint: Endpoint path relative to the API URL
            payload: JSON body (``null`` if None)

        Returns:
            Decoded JSON response

        Raises:
            DbxAPIError: If the request fails
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        client = self._get_client()

        try:
            if payload is None:
                response = client.post(url)
            else:
                response = client.post(url, json=payload)
        except httpx.RequestError as e:
            raise DbxNetworkError(f"Network error: {e}") from e

        self._raise_for_status(response)

        content_type = response.headers.get("Content-Type", "")
        if response.content and "application/json" not in content_type:
            raise DbxInvalidResponseError(f"Unexpected response type: {content_type}")
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise DbxInvalidResponseError("Invalid JSON response from server") from e

    # =========================
    # Metadata Operations
    # =========================

    def get_metadata(self, path: str) -> RemoteMetadata:
        """Get metadata for a remote file.

        Args:
            path: Remote path (with leading slash)

        Returns:
            RemoteMetadata for the file

        Raises:
            DbxNotFoundError: If nothing exists at the path
            DbxInvalidResponseError: If the path is a folder or the response
                is missing fields
            DbxAPIError: If the request fails
        """
        logger.debug(f"Fetching metadata for {path}")
        data = self._rpc("/files/get_metadata", {"path": path})
        return RemoteMetadata.from_dict(data, path=path)

    def get_current_account(self) -> Any:
        """Get the account the access token belongs to."""
        return self._rpc("/users/get_current_account")

    # =========================
    # Upload Operations
    # =========================

    def _content_request(
        self,
        endpoint: str,
        arg: dict[str, Any] | None,
        content: Any = b"",
        content_length: int | None = None,
    ) -> Any:
        url = f"{self.content_url}/{endpoint.lstrip('/')}"
        headers = {"Content-Type": "application/octet-stream"}
        if arg is not None:
            headers["Dropbox-API-Arg"] = _api_arg(arg)
        if content_length is not None:
            headers["Content-Length"] = str(content_length)

        try:
            response = self._get_client().post(url, headers=headers, content=content)
        except httpx.RequestError as e:
            raise DbxNetworkError(f"Network error during upload: {e}") from e

        self._raise_for_status(response)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise DbxInvalidResponseError("Invalid JSON response from server") from e

    def upload_file(
        self,
        file_path: Path,
        remote_path: str,
        client_modified: int | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Any:
        """Upload a local file, overwriting whatever is at the remote path.

        Args:
            file_path: Local path to the file
            remote_path: Remote destination path
            client_modified: Modification time to record remotely
                (epoch seconds, defaults to the server's time)
            progress_callback: Optional callback function(bytes_uploaded, total_bytes)

        Returns:
            Metadata of the uploaded file as returned by the server

        Raises:
            DbxReadError: If the local file cannot be read
            DbxUploadError: If the upload fails
        """
        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            raise DbxReadError(f"Cannot read {file_path}: {e}") from e

        commit: dict[str, Any] = {
            "path": remote_path,
            "mode": "overwrite",
            "autorename": False,
            "mute": False,
        }
        if client_modified is not None:
            try:
                commit["client_modified"] = format_timestamp(client_modified)
            except (OverflowError, ValueError) as e:
                raise DbxUploadError(
                    f"Modification time of {file_path} cannot be represented: {e}"
                ) from e

        logger.debug(f"Uploading {file_path} ({file_size} bytes) to {remote_path}")

        try:
            with open(file_path, "rb") as f:
                if file_size <= UPLOAD_SESSION_THRESHOLD:
                    result = self._content_request(
                        "/files/upload",
                        commit,
                        content=self._iter_file(f, file_size, progress_callback),
                        content_length=file_size,
                    )
                else:
                    result = self._upload_session(
                        f, file_size, commit, progress_callback
                    )
        except OSError as e:
            raise DbxReadError(f"Cannot read {file_path}: {e}") from e
        except (DbxNetworkError, DbxAuthenticationError):
            raise
        except DbxAPIError as e:
            raise DbxUploadError(f"Upload of {file_path} failed: {e}") from e

        return result

    def _iter_file(
        self,
        f: Any,
        total: int,
        progress_callback: Callable[[int, int], None] | None,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
    ) -> Iterator[bytes]:
        """Yield a file's bytes in chunks, reporting progress."""
        sent = 0
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            sent += len(chunk)
            if progress_callback:
                progress_callback(sent, total)
            yield chunk

    def _upload_session(
        self,
        f: Any,
        file_size: int,
        commit: dict[str, Any],
        progress_callback: Callable[[int, int], None] | None,
    ) -> Any:
        """Upload a large file in chunks using an upload session."""
        first = f.read(UPLOAD_CHUNK_SIZE)
        start = self._content_request(
            "/files/upload_session/start", {"close": False}, content=first
        )
        session_id = start.get("session_id")
        if not session_id:
            raise DbxUploadError(f"Failed to start upload session: {start}")
        offset = len(first)
        if progress_callback:
            progress_callback(offset, file_size)

        while file_size - offset > UPLOAD_CHUNK_SIZE:
            chunk = f.read(UPLOAD_CHUNK_SIZE)
            self._content_request(
                "/files/upload_session/append_v2",
                {
                    "cursor": {"session_id": session_id, "offset": offset},
                    "close": False,
                },
                content=chunk,
            )
            offset += len(chunk)
            if progress_callback:
                progress_callback(offset, file_size)

        last = f.read()
        result = self._content_request(
            "/files/upload_session/finish",
            {
                "cursor": {"session_id": session_id, "offset": offset},
                "commit": commit,
            },
            content=last,
        )
        if progress_callback:
            progress_callback(offset + len(last), file_size)
        return result

    # =========================
    # Download Operations
    # =========================

    def download_file(
        self,
        remote_path: str,
        output_path: Path,
        progress_callback: Callable[[int, int], None] | None = None,
        timeout: int = 60,
    ) -> dict[str, Any]:
        """Download a remote file to a local path.

        The content is written to a temporary file next to ``output_path``
        which then replaces the target, so an interrupted download never
        leaves a truncated file behind.

        Args:
            remote_path: Remote path of the file
            output_path: Local path where the file is saved
            progress_callback: Optional callback function(bytes_downloaded, total_bytes)
            timeout: Request timeout in seconds (default: 60)

        Returns:
            File metadata from the ``Dropbox-API-Result`` header

        Raises:
            DbxNotFoundError: If the remote file does not exist
            DbxDownloadError: If the download or the local write fails
        """
        url = f"{self.content_url}/files/download"
        headers = {"Dropbox-API-Arg": _api_arg({"path": remote_path})}
        client = self._get_client()
        tmp_path = output_path.with_name(f".{output_path.name}.pydbxsync-part")

        logger.debug(f"Downloading {remote_path} to {output_path}")

        replaced = False
        try:
            with client.stream(
                "POST", url, headers=headers, timeout=timeout
            ) as response:
                if response.status_code >= 400:
                    response.read()
                    self._raise_for_status(response)

                result_header = response.headers.get("Dropbox-API-Result", "")
                try:
                    metadata = json.loads(result_header) if result_header else {}
                except ValueError:
                    metadata = {}

                total_size = int(response.headers.get("Content-Length", 0) or 0)
                bytes_downloaded = 0

                with open(tmp_path, "wb") as f:
                    for chunk in response.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            bytes_downloaded += len(chunk)
                            if progress_callback:
                                progress_callback(bytes_downloaded, total_size)

            os.replace(tmp_path, output_path)
            replaced = True
            return metadata

        except (DbxNotFoundError, DbxAuthenticationError):
            raise
        except DbxAPIError as e:
            raise DbxDownloadError(f"Download failed: {e}") from e
        except httpx.RequestError as e:
            raise DbxNetworkError(f"Network error during download: {e}") from e
        except OSError as e:
            raise DbxDownloadError(f"Failed to write file: {e}") from e
        finally:
            # Also runs on KeyboardInterrupt
            if not replaced:
                tmp_path.unlink(missing_ok=True)
