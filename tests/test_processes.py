"""Tests for the concurrent process collector."""

import os
import threading

import pytest

from fakes import FakeProbe
from pysysinfo.config import SysInfoConfig
from pysysinfo.errors import EnumerationError, SysInfoError
from pysysinfo.include import Category
from pysysinfo.models import MemoryStats, ProcessRecord
from pysysinfo.processes import ProcessCollector, collect_processes, ordered_records


class TestProcessCollector:
    """Tests for ProcessCollector against a fake process table."""

    def test_collects_every_process(self):
        probe = FakeProbe(pids=range(1, 51))
        result = collect_processes(probe)

        assert sorted(result) == list(range(1, 51))
        record = result[7]
        assert record == ProcessRecord(
            pid=7,
            name="proc-7",
            executable="/usr/bin/proc-7",
            username="tester",
            memory=MemoryStats(rss=7 * 1024, vms=7 * 4096),
        )

    def test_four_lookups_per_process(self):
        probe = FakeProbe(pids=range(10))
        collect_processes(probe)

        for method in ("process_name", "process_executable", "process_username", "process_memory"):
            assert probe.calls[method] == 10

    def test_failed_lookups_keep_partial_record(self):
        """Test a process whose every lookup fails is kept with zero values."""
        probe = FakeProbe(pids=range(1, 21), failing_pids={5, 13})
        result = collect_processes(probe)

        assert len(result) == 20
        for pid in (5, 13):
            assert result[pid] == ProcessRecord(pid=pid)
            assert result[pid].memory is None
        assert result[6].name == "proc-6"

    def test_single_attribute_failure(self):
        """Test one failing attribute leaves the sibling attributes intact."""

        class NoUsernameProbe(FakeProbe):
            def process_username(self, proc):
                raise PermissionError("denied")

        result = collect_processes(NoUsernameProbe(pids=[1, 2]))

        assert result[1].username == ""
        assert result[1].name == "proc-1"
        assert result[1].executable == "/usr/bin/proc-1"
        assert result[1].memory is not None

    def test_none_attribute_becomes_zero_value(self):
        class NoneNameProbe(FakeProbe):
            def process_name(self, proc):
                return None

        result = collect_processes(NoneNameProbe(pids=[3]))
        assert result[3].name == ""

    def test_empty_table(self):
        """Test an empty process table yields an empty snapshot, not an error."""
        assert collect_processes(FakeProbe(pids=[])) == {}

    def test_enumeration_failure(self):
        """Test a failing table enumeration raises EnumerationError with its cause."""
        cause = PermissionError("cannot list processes")
        probe = FakeProbe(pids=[1, 2], table_error=cause)

        with pytest.raises(EnumerationError) as excinfo:
            collect_processes(probe)

        assert excinfo.value.category is Category.PROCESSES
        assert excinfo.value.__cause__ is cause
        assert isinstance(excinfo.value, SysInfoError)
        assert probe.calls["process_name"] == 0

    def test_duplicate_pids_appear_once(self):
        result = collect_processes(FakeProbe(pids=[4, 4, 5]))
        assert sorted(result) == [4, 5]

    def test_single_worker(self):
        """Test collection completes with a pool of one thread."""
        result = collect_processes(FakeProbe(pids=range(30)), SysInfoConfig(max_workers=1))
        assert len(result) == 30

    def test_pool_threads_are_joined(self):
        """Test no collector threads outlive the call."""
        collect_processes(FakeProbe(pids=range(100), latency=0.001))

        names = [t.name for t in threading.enumerate()]
        assert not any(name.startswith("ProcessCollector") for name in names)

    def test_record_published_after_all_lookups(self):
        """Test a slow attribute is present in the record once the call returns."""

        class SlowMemoryProbe(FakeProbe):
            def process_memory(self, proc):
                threading.Event().wait(0.05)
                return super().process_memory(proc)

        result = collect_processes(SlowMemoryProbe(pids=range(8)))
        assert all(record.memory is not None for record in result.values())


class TestConcurrencyInvariant:
    """Repeated collection over large tables with random latency."""

    def test_ten_thousand_processes(self):
        for _ in range(3):
            probe = FakeProbe(pids=range(10_000), latency=0.0002)
            result = ProcessCollector(probe, SysInfoConfig(max_workers=64)).collect()

            assert len(result) == 10_000
            assert set(result) == set(range(10_000))
            assert all(record.pid == pid for pid, record in result.items())

    def test_many_runs_with_failures(self):
        failing = set(range(0, 500, 7))
        for _ in range(20):
            probe = FakeProbe(pids=range(500), failing_pids=failing, latency=0.0005)
            result = collect_processes(probe)

            assert len(result) == 500
            assert {pid for pid, r in result.items() if r.name == ""} == failing


def test_ordered_records():
    """Test records are ordered by executable descending, then pid."""
    snapshot = {
        3: ProcessRecord(pid=3, executable="/a"),
        1: ProcessRecord(pid=1, executable="/b"),
        2: ProcessRecord(pid=2, executable="/a"),
        4: ProcessRecord(pid=4),
    }
    assert [r.pid for r in ordered_records(snapshot)] == [1, 2, 3, 4]


def test_collect_real_processes():
    """Test collection against the live process table includes this process."""
    result = collect_processes()

    assert os.getpid() in result
    me = result[os.getpid()]
    assert isinstance(me.name, str)
    assert me.name != ""
    for record in list(result.values())[:20]:
        assert isinstance(record, ProcessRecord)
        assert isinstance(record.username, str)
