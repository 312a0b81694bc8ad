"""Assembly of a SystemSnapshot from the requested categories."""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pysysinfo.config import SysInfoConfig
from pysysinfo.include import Category, effective_set
from pysysinfo.models import CPUInfo, SystemSnapshot
from pysysinfo.network import NetworkCollector
from pysysinfo.probe import PlatformProbe
from pysysinfo.processes import ProcessCollector, ordered_records

logger = logging.getLogger(__name__)

# Category -> SystemSnapshot field it populates
SNAPSHOT_FIELDS: dict[Category, str] = {
    Category.HOSTNAME: "hostname",
    Category.PLATFORM: "platform",
    Category.CPU: "cpu",
    Category.MEMORY: "ram",
    Category.DISK: "disk",
    Category.MAC_ADDRESS: "mac_address",
    Category.PROCESSES: "processes",
    Category.NETWORK_ADAPTERS: "net_adapters",
}


class SystemCollector:
    """
    Builds a SystemSnapshot from the categories in an include set.

    Categories that were not requested are never probed. Requested
    categories are independent of each other and run concurrently; a
    category that fails is left ``None`` and recorded in ``errors``.
    """

    def __init__(
        self,
        probe: PlatformProbe | None = None,
        config: SysInfoConfig | None = None,
    ) -> None:
        self._probe = probe or PlatformProbe()
        self._config = config or SysInfoConfig()
        self._collectors: dict[Category, Callable[[], Any]] = {
            Category.HOSTNAME: self._probe.hostname,
            Category.PLATFORM: self._probe.platform_name,
            Category.CPU: self._collect_cpu,
            Category.MEMORY: self._probe.memory,
            Category.DISK: lambda: self._probe.disk_usage(self._config.disk_path),
            Category.MAC_ADDRESS: self._probe.mac_address,
            Category.PROCESSES: self._collect_processes,
            Category.NETWORK_ADAPTERS: NetworkCollector(self._probe).collect,
        }

    def collect(self, include: Iterable[Category] = ()) -> SystemSnapshot:
        """
        Collect a snapshot of the requested categories.

        Args:
            include: Categories to collect. Empty selects all of them.

        Returns:
            SystemSnapshot with the requested categories populated.
        """
        selected = list(effective_set(include))
        values: dict[str, Any] = {}
        errors: dict[str, str] = {}

        with ThreadPoolExecutor(max_workers=len(selected), thread_name_prefix="SystemCollector") as pool:
            futures = {category: pool.submit(self._collectors[category]) for category in selected}

        for category, future in futures.items():
            try:
                values[SNAPSHOT_FIELDS[category]] = future.result()
            except Exception as exc:
                logger.warning(f"Collecting {category.value} failed: {exc}")
                errors[category.value] = str(exc) or type(exc).__name__

        return SystemSnapshot(**values, errors=errors)

    def _collect_cpu(self) -> CPUInfo:
        cpus = sorted(self._probe.cpu_identities(), key=lambda cpu: cpu.cores)
        return CPUInfo(cpus=tuple(cpus), current_usage=self._cpu_usage())

    def _cpu_usage(self) -> float:
        """Mean usage across cores; 0.0 when it cannot be sampled."""
        try:
            percents = self._probe.cpu_percent(self._config.cpu_sample_interval)
        except Exception as exc:
            logger.debug(f"CPU usage unavailable: {exc!r}")
            return 0.0
        if not percents:
            return 0.0
        return sum(percents) / len(percents)

    def _collect_processes(self):
        return ordered_records(ProcessCollector(self._probe, self._config).collect())


def collect_system(
    include: Iterable[Category] = (),
    probe: PlatformProbe | None = None,
    config: SysInfoConfig | None = None,
) -> SystemSnapshot:
    """Collect a snapshot of the requested categories; see SystemCollector."""
    return SystemCollector(probe, config).collect(include)
