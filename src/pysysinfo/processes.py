"""Concurrent collection of the process table."""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pysysinfo.config import SysInfoConfig
from pysysinfo.errors import EnumerationError
from pysysinfo.include import Category
from pysysinfo.models import ProcessRecord, ProcessSnapshot
from pysysinfo.probe import PlatformProbe

logger = logging.getLogger(__name__)

# Attribute slot -> value used when the lookup fails
ATTRIBUTE_DEFAULTS: dict[str, Any] = {
    "name": "",
    "executable": "",
    "username": "",
    "memory": None,
}


class _ProcessJoin:
    """
    Barrier collecting the attribute lookups of a single process.

    Each lookup resolves one slot. The lookup that resolves the last slot
    builds the record and hands it to ``publish``; no record is visible
    before all of its slots are resolved.
    """

    __slots__ = ("_pid", "_values", "_pending", "_lock", "_publish")

    def __init__(self, pid: int, publish: Callable[[ProcessRecord], None]) -> None:
        self._pid = pid
        self._values: dict[str, Any] = {}
        self._pending = len(ATTRIBUTE_DEFAULTS)
        self._lock = threading.Lock()
        self._publish = publish

    def resolve(self, slot: str, value: Any) -> None:
        with self._lock:
            self._values[slot] = value
            self._pending -= 1
            complete = self._pending == 0
        if complete:
            self._publish(ProcessRecord(pid=self._pid, **self._values))


class ProcessCollector:
    """
    Collects a ProcessRecord for every process in the OS process table.

    Name, executable, username and memory of each process are looked up as
    four independent tasks on a thread pool that lives only for the duration
    of one ``collect()`` call. A failed lookup leaves its attribute at the
    zero value; only a failure to list the table itself is raised.
    """

    def __init__(
        self,
        probe: PlatformProbe | None = None,
        config: SysInfoConfig | None = None,
    ) -> None:
        """
        Initialize the ProcessCollector.

        Args:
            probe: Source of OS queries. Defaults to a PlatformProbe.
            config: Collection settings; ``max_workers`` bounds the pool.
        """
        self._probe = probe or PlatformProbe()
        self._config = config or SysInfoConfig()
        self._lookups: dict[str, Callable[[Any], Any]] = {
            "name": self._probe.process_name,
            "executable": self._probe.process_executable,
            "username": self._probe.process_username,
            "memory": self._probe.process_memory,
        }

    def collect(self) -> ProcessSnapshot:
        """
        Collect records for all processes.

        Returns:
            Mapping of pid to record, one entry per enumerated process.

        Raises:
            EnumerationError: If the process table could not be listed.
        """
        try:
            procs = self._probe.processes()
        except Exception as exc:
            raise EnumerationError(
                Category.PROCESSES, f"Could not enumerate processes: {exc}"
            ) from exc

        result: ProcessSnapshot = {}
        if not procs:
            return result

        result_lock = threading.Lock()

        def publish(record: ProcessRecord) -> None:
            with result_lock:
                if record.pid in result:
                    logger.debug(f"Duplicate pid {record.pid} in process table, keeping first")
                    return
                result[record.pid] = record

        workers = min(self._config.max_workers, len(procs) * len(self._lookups))
        # Leaving the executor waits for every lookup, and therefore every publish
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ProcessCollector") as pool:
            for proc in procs:
                join = _ProcessJoin(proc.pid, publish)
                for slot in self._lookups:
                    pool.submit(self._lookup, proc, slot, join)

        logger.debug(f"Collected {len(result)} of {len(procs)} processes")
        return result

    def _lookup(self, proc: Any, slot: str, join: _ProcessJoin) -> None:
        """Run one attribute lookup and resolve its slot, failed or not."""
        value = ATTRIBUTE_DEFAULTS[slot]
        try:
            value = self._lookups[slot](proc)
        except Exception as exc:
            # NoSuchProcess, AccessDenied, ZombieProcess and friends
            logger.debug(f"{slot} unavailable for pid {proc.pid}: {exc!r}")
        join.resolve(slot, ATTRIBUTE_DEFAULTS[slot] if value is None else value)


def collect_processes(
    probe: PlatformProbe | None = None,
    config: SysInfoConfig | None = None,
) -> ProcessSnapshot:
    """Collect the current process table; see ProcessCollector."""
    return ProcessCollector(probe, config).collect()


def ordered_records(snapshot: ProcessSnapshot) -> tuple[ProcessRecord, ...]:
    """Records ordered by executable path descending, then pid."""
    by_pid = sorted(snapshot.values(), key=lambda p: p.pid)
    return tuple(sorted(by_pid, key=lambda p: p.executable, reverse=True))
