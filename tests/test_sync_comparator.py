"""Tests for the FileComparator class."""

import os
import stat
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from pydbxsync.exceptions import DbxReadError
from pydbxsync.hasher import file_content_hash
from pydbxsync.models import RemoteMetadata
from pydbxsync.sync.comparator import FileComparator, SyncAction
from pydbxsync.sync.probe import LocalFile, LocalFileProbe


def content_hash_of(tmp_path: Path, content: bytes) -> str:
    """Hash ``content`` the way the remote store would."""
    path = tmp_path / "reference.bin"
    path.write_bytes(content)
    return file_content_hash(path)


def make_local(tmp_path: Path, content: bytes, mtime: int) -> LocalFile:
    """Create a local file with given content and mtime and probe it."""
    path = tmp_path / "local.txt"
    path.write_bytes(content)
    os.utime(path, (mtime, mtime))
    return LocalFileProbe().probe(path)


def make_remote(content_hash: str, mtime: int) -> RemoteMetadata:
    return RemoteMetadata(
        path="/remote.txt", exists=True, content_hash=content_hash, modified_at=mtime
    )


class TestDecisionScenarios:
    """The six literal decision scenarios."""

    def test_local_absent_remote_exists_downloads(self, tmp_path):
        """Local file absent, remote exists -> DOWNLOAD."""
        comparator = FileComparator()
        local = LocalFileProbe().probe(tmp_path / "missing.txt")
        remote = make_remote(content_hash_of(tmp_path, b"A"), 100)

        decision = comparator.decide(local, remote)

        assert decision.action == SyncAction.DOWNLOAD
        assert decision.reason == "local missing"
        assert decision.conflict is False

    def test_local_exists_remote_absent_uploads(self, tmp_path):
        """Local "A" at mtime 100, remote absent -> UPLOAD."""
        comparator = FileComparator()
        local = make_local(tmp_path, b"A", 100)

        decision = comparator.decide(local, RemoteMetadata.absent("/remote.txt"))

        assert decision.action == SyncAction.UPLOAD
        assert decision.reason == "remote missing"

    def test_same_content_is_unchanged_even_if_mtimes_differ(self, tmp_path):
        """Both "A" -> NONE ("unchanged") regardless of mtimes."""
        comparator = FileComparator()
        remote_hash = content_hash_of(tmp_path, b"A")

        for local_mtime, remote_mtime in [(100, 200), (300, 200), (200, 200)]:
            local = make_local(tmp_path, b"A", local_mtime)
            decision = comparator.decide(local, make_remote(remote_hash, remote_mtime))

            assert decision.action == SyncAction.NONE
            assert decision.reason == "unchanged"
            assert decision.conflict is False
            assert decision.local_hash == remote_hash

    def test_remote_newer_downloads(self, tmp_path):
        """Local "A" at 100, remote "B" at 200 -> DOWNLOAD ("remote newer")."""
        comparator = FileComparator()
        remote = make_remote(content_hash_of(tmp_path, b"B"), 200)
        local = make_local(tmp_path, b"A", 100)

        decision = comparator.decide(local, remote)

        assert decision.action == SyncAction.DOWNLOAD
        assert decision.reason == "remote newer"

    def test_local_newer_uploads(self, tmp_path):
        """Local "B" at 300, remote "A" at 200 -> UPLOAD ("local newer")."""
        comparator = FileComparator()
        remote = make_remote(content_hash_of(tmp_path, b"A"), 200)
        local = make_local(tmp_path, b"B", 300)

        decision = comparator.decide(local, remote)

        assert decision.action == SyncAction.UPLOAD
        assert decision.reason == "local newer"

    def test_equal_mtimes_different_content_is_conflict(self, tmp_path):
        """Local "B" at 200, remote "A" at 200 -> NONE with a conflict."""
        comparator = FileComparator()
        remote = make_remote(content_hash_of(tmp_path, b"A"), 200)
        local = make_local(tmp_path, b"B", 200)

        decision = comparator.decide(local, remote)

        assert decision.action == SyncAction.NONE
        assert decision.conflict is True
        assert decision.reason == "conflict"
        assert decision.reason != "unchanged"


class TestDecisionOrder:
    """Rules are evaluated in order and skip unnecessary work."""

    def test_missing_local_is_not_hashed(self):
        """No hash is computed when the local file is absent."""
        hash_file = Mock()
        comparator = FileComparator(hash_file=hash_file)

        decision = comparator.decide(
            LocalFile.missing(Path("/nowhere")), RemoteMetadata.absent("/x")
        )

        assert decision.action == SyncAction.DOWNLOAD
        hash_file.assert_not_called()

    def test_missing_remote_is_not_hashed(self):
        """No hash is computed when the remote file is absent."""
        hash_file = Mock()
        comparator = FileComparator(hash_file=hash_file)
        local = LocalFile(path=Path("/a"), exists=True, modified_at=1, size=1)

        decision = comparator.decide(local, RemoteMetadata.absent("/a"))

        assert decision.action == SyncAction.UPLOAD
        hash_file.assert_not_called()

    def test_injected_hash_function_is_used(self):
        """The hash function can be replaced."""
        comparator = FileComparator(hash_file=lambda path: "f" * 64)
        local = LocalFile(path=Path("/a"), exists=True, modified_at=1, size=1)

        decision = comparator.decide(local, make_remote("f" * 64, 5))

        assert decision.action == SyncAction.NONE
        assert decision.reason == "unchanged"

    def test_read_failure_propagates(self):
        """A read failure while hashing is raised, not turned into a decision."""
        hash_file = Mock(side_effect=DbxReadError("Cannot read /a"))
        comparator = FileComparator(hash_file=hash_file)
        local = LocalFile(path=Path("/a"), exists=True, modified_at=1, size=1)

        with pytest.raises(DbxReadError):
            comparator.decide(local, make_remote("0" * 64, 5))


class TestLocalFileProbe:
    """Tests for LocalFileProbe."""

    def test_missing_file(self, tmp_path):
        local = LocalFileProbe().probe(tmp_path / "nope")
        assert local.exists is False
        assert local.modified_at is None

    def test_existing_file_whole_seconds(self, tmp_path):
        """Modification time is truncated to whole seconds."""
        path = tmp_path / "file.txt"
        path.write_bytes(b"12345")
        os.utime(path, (1000.75, 1000.75))

        local = LocalFileProbe().probe(path)

        assert local.exists is True
        assert local.modified_at == 1000
        assert local.size == 5

    def test_directory_raises(self, tmp_path):
        """A directory is not a syncable file."""
        with pytest.raises(DbxReadError, match="not a regular file"):
            LocalFileProbe().probe(tmp_path)

    def test_out_of_range_mtime_raises(self):
        """A modification time past year 9999 cannot be sent to the remote store."""
        path = Mock(spec=Path)
        path.stat.return_value = SimpleNamespace(
            st_mode=stat.S_IFREG | 0o644, st_mtime=300_000_000_000.0, st_size=1
        )

        with pytest.raises(DbxReadError, match="out of range"):
            LocalFileProbe().probe(path)

    def test_last_representable_mtime_is_accepted(self):
        path = Mock(spec=Path)
        path.stat.return_value = SimpleNamespace(
            st_mode=stat.S_IFREG | 0o644, st_mtime=253402300799.0, st_size=1
        )

        assert LocalFileProbe().probe(path).modified_at == 253402300799
