"""Access token lookup for CLI commands."""

from typing import Any, Optional

from .config import config
from .exceptions import DbxConfigError


def require_access_token(ctx: Any) -> str:
    """Return the access token for the current command.

    The ``--access-token`` option wins over the environment and the config
    file.

    Args:
        ctx: Click context whose ``obj`` holds the global options

    Returns:
        Access token

    Raises:
        DbxConfigError: If no access token is available anywhere
    """
    token: Optional[str] = ctx.obj.get("access_token")
    if token:
        return token
    if not config.is_configured():
        raise DbxConfigError(
            "No access token configured. Use --access-token, set "
            "DROPBOX_ACCESS_TOKEN, or run 'pydbxsync init'."
        )
    return config.access_token
