"""Tests for JSON encoding of snapshots."""

import json

import pytest

from fakes import FakeProbe
from pysysinfo.codec import from_dict, from_json, to_dict, to_json
from pysysinfo.collector import collect_system
from pysysinfo.errors import SnapshotDecodeError
from pysysinfo.include import Category
from pysysinfo.models import ProcessRecord, SystemSnapshot


class TestEncoding:
    def test_absent_categories_are_omitted(self):
        snapshot = collect_system([Category.CPU, Category.MEMORY], probe=FakeProbe())
        data = json.loads(to_json(snapshot))

        assert set(data) == {"cpu", "ram"}
        assert data["ram"] == {
            "total": 16 * 1024**3,
            "used": 4 * 1024**3,
            "free": 12 * 1024**3,
            "swap": 2 * 1024**3,
        }
        assert data["cpu"]["current_usage"] == 20.0
        assert data["cpu"]["cpus"][0]["flags"] == ["sse", "avx"]

    def test_errors_included_when_present(self):
        snapshot = SystemSnapshot(hostname="h", errors={"memory": "boom"})
        assert to_dict(snapshot) == {"hostname": "h", "errors": {"memory": "boom"}}

    def test_missing_process_memory_omitted(self):
        snapshot = SystemSnapshot(processes=(ProcessRecord(pid=9, name="x"),))
        assert to_dict(snapshot)["processes"] == [
            {"pid": 9, "name": "x", "executable": "", "username": ""}
        ]

    def test_compact_output(self):
        assert to_json(SystemSnapshot(hostname="h"), indent=None) == '{"hostname": "h"}'


class TestDecoding:
    def test_full_snapshot_survives_transport(self):
        snapshot = collect_system([], probe=FakeProbe(pids=range(6), failing_pids={2}))
        assert from_json(to_json(snapshot)) == snapshot

    def test_partial_snapshot_survives_transport(self):
        snapshot = collect_system([Category.NETWORK_ADAPTERS, Category.DISK], probe=FakeProbe())
        decoded = from_json(to_json(snapshot).encode())

        assert decoded == snapshot
        assert decoded.cpu is None
        assert decoded.net_adapters[0].ports is not None

    def test_empty_object(self):
        assert from_dict({}) == SystemSnapshot()

    def test_invalid_json(self):
        with pytest.raises(SnapshotDecodeError, match="Invalid JSON"):
            from_json("{not json")

    def test_not_an_object(self):
        with pytest.raises(SnapshotDecodeError):
            from_json("[1, 2]")

    def test_malformed_category(self):
        with pytest.raises(SnapshotDecodeError, match="Malformed"):
            from_dict({"ram": {"total": 1}})

    def test_errors_not_a_mapping(self):
        with pytest.raises(SnapshotDecodeError, match="Malformed"):
            from_dict({"errors": ["abc"]})

    def test_invalid_utf8(self):
        with pytest.raises(SnapshotDecodeError, match="Invalid JSON"):
            from_json(b'{"hostname": "\xff"}')

    def test_process_without_pid(self):
        with pytest.raises(SnapshotDecodeError):
            from_dict({"processes": [{"name": "x"}]})
