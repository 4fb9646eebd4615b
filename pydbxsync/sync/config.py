"""Loading sync pairs from a JSON file."""

import json
import logging
from pathlib import Path
from typing import Any

from ..exceptions import DbxConfigError
from .pair import SyncPair

logger = logging.getLogger(__name__)


class SyncConfigError(DbxConfigError):
    """The sync pairs file is missing or malformed."""


def load_sync_pairs_from_json(path: Path) -> list[SyncPair]:
    """Load sync pairs from a JSON file.

    The file holds a list of objects with ``local`` and ``remote`` keys::

        [
            {"local": "~/notes.txt", "remote": "/notes.txt"},
            {"local": "todo.md", "remote": "/work/todo.md"}
        ]

    Args:
        path: Path to the JSON file

    Returns:
        Sync pairs in file order

    Raises:
        SyncConfigError: If the file cannot be read or has the wrong shape
    """
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SyncConfigError(f"Cannot read sync pairs file {path}: {e}") from e
    except ValueError as e:
        raise SyncConfigError(f"Invalid JSON in sync pairs file {path}: {e}") from e

    if not isinstance(data, list):
        raise SyncConfigError(
            f"Sync pairs file {path} must contain a list of pairs"
        )

    pairs = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise SyncConfigError(f"Entry {index} in {path} is not an object")
        try:
            pairs.append(SyncPair.from_dict(item))
        except DbxConfigError as e:
            raise SyncConfigError(f"Entry {index} in {path}: {e}") from e

    logger.debug(f"Loaded {len(pairs)} sync pair(s) from {path}")
    return pairs
