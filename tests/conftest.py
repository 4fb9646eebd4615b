"""Shared pytest fixtures."""

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep tests away from the user's real config file and environment."""
    config_path = tmp_path_factory.mktemp("config") / "config"
    monkeypatch.setenv("PYDBXSYNC_CONFIG", str(config_path))
    for key in ("DROPBOX_ACCESS_TOKEN", "DROPBOX_API_URL", "DROPBOX_CONTENT_URL"):
        monkeypatch.delenv(key, raising=False)
    return config_path
