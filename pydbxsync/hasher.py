"""Content hashing compatible with the remote store's ``content_hash`` field.

The remote store does not expose a plain digest of the file. Instead the
file is split into 4 MB blocks, every block is hashed with SHA-256, and the
hex encoded ``content_hash`` is the SHA-256 of the concatenated raw block
digests. An empty file therefore hashes to the SHA-256 of zero bytes.

Computing the same value locally lets the sync engine decide whether a local
file and a remote object have identical content without transferring it.
"""

import hashlib
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .exceptions import DbxReadError

logger = logging.getLogger(__name__)

BLOCK_SIZE: int = 4 * 1024 * 1024

EMPTY_CONTENT_HASH: str = hashlib.sha256(b"").hexdigest()


class ContentHasher:
    """Incremental content hasher with a ``hashlib``-like interface.

    At most one partial block is buffered, so the result does not depend on
    how the input is split across ``update()`` calls.

    Examples:
        >>> hasher = ContentHasher()
        >>> hasher.update(b"")
        >>> hasher.hexdigest() == EMPTY_CONTENT_HASH
        True
    """

    name = "content_hash"
    digest_size = 32
    block_size = BLOCK_SIZE

    def __init__(self) -> None:
        self._overall = hashlib.sha256()
        self._block = hashlib.sha256()
        self._block_pos = 0
        self._finished = False

    def update(self, data: bytes) -> None:
        """Feed more bytes into the hasher.

        Args:
            data: Next chunk of content, of any length

        Raises:
            RuntimeError: If the digest has already been taken
        """
        if self._finished:
            raise RuntimeError("Can't use this object anymore; digest was taken")

        view = memoryview(data)
        offset = 0
        while offset < len(view):
            if self._block_pos == BLOCK_SIZE:
                self._overall.update(self._block.digest())
                self._block = hashlib.sha256()
                self._block_pos = 0

            take = min(len(view) - offset, BLOCK_SIZE - self._block_pos)
            self._block.update(view[offset : offset + take])
            self._block_pos += take
            offset += take

    def digest(self) -> bytes:
        """Finish hashing and return the raw 32-byte digest."""
        if self._block_pos > 0:
            self._overall.update(self._block.digest())
            self._block_pos = 0
        self._finished = True
        return self._overall.digest()

    def hexdigest(self) -> str:
        """Finish hashing and return the 64 character hex digest."""
        return self.digest().hex()

    def copy(self) -> "ContentHasher":
        """Return an independent copy of the current hashing state."""
        clone = ContentHasher.__new__(ContentHasher)
        clone._overall = self._overall.copy()
        clone._block = self._block.copy()
        clone._block_pos = self._block_pos
        clone._finished = self._finished
        return clone


def stream_content_hash(stream: BinaryIO, size: Optional[int] = None) -> str:
    """Compute the content hash of a binary stream.

    Reads the stream one block at a time, so memory use stays bounded by the
    block size regardless of the stream length.

    Args:
        stream: Binary file-like object positioned at the start of the content
        size: Optional number of bytes to consume (reads to EOF if None)

    Returns:
        64 character lowercase hex content hash
    """
    hasher = ContentHasher()
    remaining = size

    while remaining is None or remaining > 0:
        want = BLOCK_SIZE if remaining is None else min(BLOCK_SIZE, remaining)
        chunk = stream.read(want)
        if not chunk:
            break
        hasher.update(chunk)
        if remaining is not None:
            remaining -= len(chunk)

    return hasher.hexdigest()


def file_content_hash(path: Union[str, Path]) -> str:
    """Compute the content hash of a local file.

    Args:
        path: Path to the local file

    Returns:
        64 character lowercase hex content hash

    Raises:
        DbxReadError: If the file cannot be opened or read
    """
    try:
        with open(path, "rb") as f:
            content_hash = stream_content_hash(f)
    except OSError as e:
        raise DbxReadError(f"Cannot read {path}: {e}") from e

    logger.debug("Content hash of %s: %s", path, content_hash)
    return content_hash
