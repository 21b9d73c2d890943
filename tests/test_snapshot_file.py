"""
Tests for tolerant YAML loading and snapshot serialization.
"""

import logging
import tempfile
from datetime import timedelta
from pathlib import Path

from hypothesis import given, settings
from hypothesis import strategies as st

from gitmeta.core.fields import EPOCH
from gitmeta.core.snapshot_file import (
    LoadStatus,
    dump_snapshot,
    load_snapshot,
    load_yaml_mapping,
    save_snapshot,
)


class TestLoadYamlMapping:
    """Test that load errors are distinguishable but never fatal."""

    def test_missing_file(self, tmp_path):
        result = load_yaml_mapping(tmp_path / "absent.yml")

        assert result.status == LoadStatus.MISSING
        assert result.data == {}
        assert not result.ok

    def test_empty_file_loads_as_empty_mapping(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")

        result = load_yaml_mapping(path)

        assert result.ok
        assert result.data == {}

    def test_malformed_yaml_is_invalid(self, tmp_path, caplog):
        path = tmp_path / "bad.yml"
        path.write_text("fields: [mtime\nexclude: {", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            result = load_yaml_mapping(path)

        assert result.status == LoadStatus.INVALID
        assert result.data == {}
        assert "Failed to parse YAML" in result.error_message
        assert any("Ignoring" in record.message for record in caplog.records)

    def test_non_mapping_is_invalid(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        result = load_yaml_mapping(path)

        assert result.status == LoadStatus.INVALID
        assert "list" in result.error_message

    def test_invalid_utf8_is_invalid(self, tmp_path):
        path = tmp_path / "binary.yml"
        path.write_bytes(b"\xff\xfe\x00\x01")

        result = load_yaml_mapping(path)

        assert result.status == LoadStatus.INVALID
        assert "UTF-8" in result.error_message

    def test_directory_is_invalid(self, tmp_path):
        result = load_yaml_mapping(tmp_path)
        assert result.status == LoadStatus.INVALID


class TestSnapshotFile:
    """Test snapshot load/save."""

    def test_missing_snapshot_is_empty(self, tmp_path):
        assert load_snapshot(tmp_path / "git-meta.store.yml") == {}

    def test_malformed_entries_dropped(self, tmp_path):
        path = tmp_path / "store.yml"
        path.write_text("good.txt:\n  mode: 33188\nbad.txt: 5\n", encoding="utf-8")

        assert load_snapshot(path) == {"good.txt": {"mode": 33188}}

    def test_timestamps_round_trip_as_aware_datetimes(self, tmp_path):
        path = tmp_path / "store.yml"
        mtime = EPOCH + timedelta(days=18000, microseconds=123456)
        snapshot = {"a/b.txt": {"mtime": mtime, "mode": 0o100644, "uid": 1000}}

        save_snapshot(path, snapshot)
        loaded = load_snapshot(path)

        assert loaded == snapshot
        assert loaded["a/b.txt"]["mtime"].utcoffset() == timedelta(0)

    def test_dump_is_sorted(self):
        text = dump_snapshot({"b.txt": {"uid": 1, "mode": 2}, "a.txt": {"gid": 3}})

        assert text.index("a.txt") < text.index("b.txt")
        assert text.index("mode") < text.index("uid")

    def test_save_creates_parent_directories(self, tmp_path):
        path = tmp_path / "meta" / "store.yml"
        save_snapshot(path, {})
        assert path.exists()


entry_strategy = st.fixed_dictionaries(
    {
        "mtime": st.integers(min_value=0, max_value=4_000_000_000 * 10**6).map(
            lambda us: EPOCH + timedelta(microseconds=us)
        ),
        "mode": st.integers(min_value=0, max_value=0o177777),
        "uid": st.integers(min_value=0, max_value=2**31),
    }
)
snapshot_strategy = st.dictionaries(
    st.from_regex(r"[a-z0-9_]{1,8}(/[a-z0-9_.]{1,8}){0,3}", fullmatch=True),
    entry_strategy,
    max_size=10,
)


@given(snapshot=snapshot_strategy)
@settings(max_examples=50, deadline=None)
def test_save_load_save_is_byte_identical(snapshot):
    """
    *For any* snapshot, writing what was loaded reproduces the same bytes.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "store.yml"
        save_snapshot(path, snapshot)
        first = path.read_bytes()

        save_snapshot(path, load_snapshot(path))

        assert path.read_bytes() == first
