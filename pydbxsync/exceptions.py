"""Exceptions raised by pydbxsync."""


class DbxError(Exception):
    """Base class for all pydbxsync errors."""


class DbxConfigError(DbxError):
    """Configuration or setup failure (missing token, bad pair list)."""


class DbxReadError(DbxError):
    """A local file could not be read while probing or hashing it."""


class DbxAPIError(DbxError):
    """Any failure talking to the remote content store."""


class DbxAuthenticationError(DbxAPIError):
    """The access token was rejected."""


class DbxPermissionError(DbxAPIError):
    """The access token lacks permission for the request."""


class DbxNotFoundError(DbxAPIError):
    """The requested remote path does not exist."""


class DbxRateLimitError(DbxAPIError):
    """Too many requests."""


class DbxNetworkError(DbxAPIError):
    """Transport level failure (DNS, connection, timeout)."""


class DbxInvalidResponseError(DbxAPIError):
    """The server answered with something we cannot interpret."""


class DbxUploadError(DbxAPIError):
    """An upload failed."""


class DbxDownloadError(DbxAPIError):
    """A download failed."""
