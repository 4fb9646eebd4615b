"""Unit tests for sync pairs and pair loading."""

import json
from pathlib import Path

import pytest

from pydbxsync.exceptions import DbxConfigError
from pydbxsync.sync.config import SyncConfigError, load_sync_pairs_from_json
from pydbxsync.sync.pair import SyncPair, pairs_from_args


class TestSyncPair:
    """Tests for SyncPair class."""

    def test_create_sync_pair(self):
        """Test creating a basic sync pair."""
        pair = SyncPair(local=Path("/home/user/notes.txt"), remote="/notes.txt")

        assert pair.local == Path("/home/user/notes.txt")
        assert pair.remote == "/notes.txt"

    def test_sync_pair_normalization(self):
        """Test that paths are normalized."""
        pair = SyncPair(
            local="/home/user/notes.txt",  # String converted to Path
            remote="Documents//notes.txt/",  # Leading slash added, extras removed
        )

        assert isinstance(pair.local, Path)
        assert pair.remote == "/Documents/notes.txt"

    def test_home_directory_is_expanded(self):
        pair = SyncPair(local="~/notes.txt", remote="/notes.txt")
        assert pair.local == Path.home() / "notes.txt"

    def test_root_remote_is_rejected(self):
        """The remote side must name a file, not the root."""
        with pytest.raises(DbxConfigError, match="must name a file"):
            SyncPair(local=Path("a.txt"), remote="/")

    def test_from_dict(self):
        pair = SyncPair.from_dict({"local": "/tmp/a.txt", "remote": "a.txt"})
        assert pair.local == Path("/tmp/a.txt")
        assert pair.remote == "/a.txt"

    def test_from_dict_missing_key(self):
        with pytest.raises(DbxConfigError, match="needs both"):
            SyncPair.from_dict({"local": "/tmp/a.txt"})

    def test_to_dict(self):
        pair = SyncPair(local=Path("/tmp/a.txt"), remote="/a.txt")
        assert pair.to_dict() == {"local": "/tmp/a.txt", "remote": "/a.txt"}

    def test_str(self):
        pair = SyncPair(local=Path("/tmp/a.txt"), remote="/a.txt")
        assert str(pair) == "/tmp/a.txt <-> /a.txt"


class TestPairsFromArgs:
    """Tests for pairs_from_args."""

    def test_alternating_arguments(self):
        pairs = pairs_from_args(["a.txt", "/a.txt", "b.txt", "docs/b.txt"])

        assert [(p.local, p.remote) for p in pairs] == [
            (Path("a.txt"), "/a.txt"),
            (Path("b.txt"), "/docs/b.txt"),
        ]

    def test_order_is_preserved(self):
        args = []
        for i in range(5):
            args.extend([f"local{i}", f"/remote{i}"])

        pairs = pairs_from_args(args)

        assert [p.remote for p in pairs] == [f"/remote{i}" for i in range(5)]

    def test_empty(self):
        assert pairs_from_args([]) == []

    def test_odd_number_of_arguments(self):
        with pytest.raises(DbxConfigError, match="odd number"):
            pairs_from_args(["a.txt", "/a.txt", "b.txt"])


class TestLoadSyncPairsFromJson:
    """Tests for loading sync pairs from a JSON file."""

    def test_load(self, tmp_path):
        path = tmp_path / "pairs.json"
        path.write_text(
            json.dumps(
                [
                    {"local": "/tmp/a.txt", "remote": "/a.txt"},
                    {"local": "/tmp/b.txt", "remote": "work/b.txt"},
                ]
            )
        )

        pairs = load_sync_pairs_from_json(path)

        assert [p.remote for p in pairs] == ["/a.txt", "/work/b.txt"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SyncConfigError, match="Cannot read"):
            load_sync_pairs_from_json(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "pairs.json"
        path.write_text("{not json")

        with pytest.raises(SyncConfigError, match="Invalid JSON"):
            load_sync_pairs_from_json(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "pairs.json"
        path.write_text(json.dumps({"local": "a", "remote": "/a"}))

        with pytest.raises(SyncConfigError, match="list of pairs"):
            load_sync_pairs_from_json(path)

    def test_bad_entry(self, tmp_path):
        path = tmp_path / "pairs.json"
        path.write_text(json.dumps([{"local": "a"}]))

        with pytest.raises(SyncConfigError, match="Entry 0"):
            load_sync_pairs_from_json(path)

    def test_config_error_is_dbx_config_error(self):
        assert issubclass(SyncConfigError, DbxConfigError)
