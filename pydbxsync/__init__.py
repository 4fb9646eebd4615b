"""pydbxsync - reconcile local files with a Dropbox-style content store."""

from .api import DbxClient
from .exceptions import (
    DbxAPIError,
    DbxAuthenticationError,
    DbxConfigError,
    DbxDownloadError,
    DbxError,
    DbxInvalidResponseError,
    DbxNetworkError,
    DbxNotFoundError,
    DbxPermissionError,
    DbxRateLimitError,
    DbxReadError,
    DbxUploadError,
)
from .hasher import ContentHasher, file_content_hash, stream_content_hash
from .models import RemoteMetadata
from .utils import format_timestamp, parse_timestamp

__all__ = [
    "DbxClient",
    "DbxError",
    "DbxAPIError",
    "DbxAuthenticationError",
    "DbxConfigError",
    "DbxDownloadError",
    "DbxInvalidResponseError",
    "DbxNetworkError",
    "DbxNotFoundError",
    "DbxPermissionError",
    "DbxRateLimitError",
    "DbxReadError",
    "DbxUploadError",
    "ContentHasher",
    "RemoteMetadata",
    "file_content_hash",
    "stream_content_hash",
    "format_timestamp",
    "parse_timestamp",
]
