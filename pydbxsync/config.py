"""Configuration management for pydbxsync.

Settings are read from the environment first and then from a dotenv-style
``KEY=value`` file at ``~/.config/pydbxsync/config``.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.dropboxapi.com/2"
DEFAULT_CONTENT_URL = "https://content.dropboxapi.com/2"

ACCESS_TOKEN_KEY = "DROPBOX_ACCESS_TOKEN"


class Config:
    """Configuration values for the remote store client."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._config_path = config_path

    def get_config_path(self) -> Path:
        """Return the path of the config file."""
        if self._config_path is not None:
            return self._config_path
        env_path = os.environ.get("PYDBXSYNC_CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        return Path.home() / ".config" / "pydbxsync" / "config"

    def _read_file(self) -> dict[str, str]:
        path = self.get_config_path()
        if not path.is_file():
            return {}

        try:
            values = dotenv_values(path)
        except OSError as e:
            logger.warning(f"Could not read config file {path}: {e}")
            return {}
        # A bare KEY line without "=" has no value
        return {key: value for key, value in values.items() if value is not None}

    def _get(self, key: str) -> Optional[str]:
        value = os.environ.get(key)
        if value:
            return value
        return self._read_file().get(key) or None

    @property
    def access_token(self) -> Optional[str]:
        """Access token for the remote store API."""
        return self._get(ACCESS_TOKEN_KEY)

    @property
    def api_url(self) -> str:
        """Base URL for RPC endpoints."""
        return self._get("DROPBOX_API_URL") or DEFAULT_API_URL

    @property
    def content_url(self) -> str:
        """Base URL for content upload/download endpoints."""
        return self._get("DROPBOX_CONTENT_URL") or DEFAULT_CONTENT_URL

    def is_configured(self) -> bool:
        """Check whether an access token is available."""
        return bool(self.access_token)

    def save_access_token(self, access_token: str) -> None:
        """Store the access token in the config file.

        Other keys already present in the file are preserved.
        """
        path = self.get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(mode=0o600, exist_ok=True)
        set_key(path, ACCESS_TOKEN_KEY, access_token, quote_mode="never")
        path.chmod(0o600)
        logger.debug(f"Saved access token to {path}")


config = Config()
