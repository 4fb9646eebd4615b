"""Sync pair definition."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, Union

from ..exceptions import DbxConfigError
from ..utils import normalize_remote_path


@dataclass
class SyncPair:
    """One local file and the remote path it is reconciled with.

    Paths are taken as given; nothing is derived from one side to the other.
    """

    local: Path
    """Local file path"""

    remote: str
    """Remote file path (normalized to a leading slash)"""

    def __post_init__(self) -> None:
        if isinstance(self.local, str):
            self.local = Path(self.local)
        self.local = self.local.expanduser()

        if not str(self.remote).strip("/"):
            raise DbxConfigError(f"Remote path for {self.local} must name a file")
        self.remote = normalize_remote_path(str(self.remote))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncPair":
        """Create a sync pair from a dictionary with ``local`` and ``remote`` keys.

        Raises:
            DbxConfigError: If a key is missing or empty
        """
        local = data.get("local")
        remote = data.get("remote")
        if not local or not remote:
            raise DbxConfigError(
                f"Sync pair needs both 'local' and 'remote' entries: {data!r}"
            )
        return cls(local=Path(str(local)), remote=str(remote))

    def to_dict(self) -> dict[str, str]:
        """Convert the sync pair to a dictionary."""
        return {"local": str(self.local), "remote": self.remote}

    def __str__(self) -> str:
        return f"{self.local} <-> {self.remote}"


def pairs_from_args(args: Sequence[Union[str, Path]]) -> list[SyncPair]:
    """Build sync pairs from an alternating local/remote argument list.

    Args:
        args: ``[local1, remote1, local2, remote2, ...]``

    Returns:
        Sync pairs in argument order

    Raises:
        DbxConfigError: If the number of arguments is odd

    Examples:
        >>> pairs = pairs_from_args(["a.txt", "/a.txt", "b.txt", "docs/b.txt"])
        >>> [str(p) for p in pairs]
        ['a.txt <-> /a.txt', 'b.txt <-> /docs/b.txt']
    """
    if len(args) % 2 != 0:
        raise DbxConfigError(
            f"Expected LOCAL REMOTE pairs, got an odd number of paths ({len(args)})"
        )
    return [
        SyncPair(local=Path(args[i]), remote=str(args[i + 1]))
        for i in range(0, len(args), 2)
    ]
