"""Platform interrogation backed by psutil and py-cpuinfo.

Every method is an independent OS query and may raise on its own; callers
decide whether a failure is fatal to a category or only to one attribute.
"""

import logging
import platform
import socket
from pathlib import Path
from typing import Any

import cpuinfo
import psutil

from pysysinfo.models import CPUCore, DiskInfo, MemoryStats, RAMInfo

logger = logging.getLogger(__name__)

NULL_MAC = "00:00:00:00:00:00"


def normalize_mac(address: str) -> str:
    """Lower-case, colon separated form of a hardware address."""
    return address.replace("-", ":").lower()


class PlatformProbe:
    """Per-attribute queries against the local operating system."""

    # Host identity

    def hostname(self) -> str:
        return socket.gethostname().strip()

    def platform_name(self) -> str:
        """Distribution id on Linux, lower-cased system name elsewhere."""
        if platform.system() == "Linux":
            try:
                return platform.freedesktop_os_release().get("ID", "linux").strip()
            except OSError:
                logger.debug("os-release not readable, falling back to system name")
        return platform.system().lower().strip()

    # CPU

    def cpu_identities(self) -> list[CPUCore]:
        info = cpuinfo.get_cpu_info()
        hz_actual = info.get("hz_actual") or (0, 0)
        cache_size = info.get("l2_cache_size") or 0
        return [
            CPUCore(
                cpu=0,
                vendor_id=info.get("vendor_id_raw", ""),
                family=str(info.get("family", "")),
                model=str(info.get("model", "")),
                stepping=int(info.get("stepping") or 0),
                physical_id="0",
                core_id="",
                cores=psutil.cpu_count(logical=False) or info.get("count", 0),
                model_name=info.get("brand_raw", ""),
                mhz=hz_actual[0] / 1_000_000,
                cache_size=cache_size // 1024 if isinstance(cache_size, int) else 0,
                flags=tuple(info.get("flags", ())),
            )
        ]

    def cpu_percent(self, interval: float) -> list[float]:
        """Per-core usage sampled over ``interval`` seconds."""
        return psutil.cpu_percent(interval=interval, percpu=True)

    # Memory and disk

    def memory(self) -> RAMInfo:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return RAMInfo(total=vm.total, used=vm.used, free=vm.free, swap=swap.total)

    def disk_usage(self, path: str) -> DiskInfo:
        usage = psutil.disk_usage(path)
        return DiskInfo(
            sys_id=self._device_for(path),
            path=path,
            total=usage.total,
            used=usage.used,
            free=usage.free,
        )

    def _device_for(self, path: str) -> str:
        """Device of the partition mounted closest to ``path``, if any."""
        try:
            partitions = psutil.disk_partitions(all=False)
        except (psutil.Error, OSError):
            logger.debug(f"Could not list partitions for {path}", exc_info=True)
            return ""
        best = None
        for part in partitions:
            if Path(path).is_relative_to(part.mountpoint):
                if best is None or len(part.mountpoint) > len(best.mountpoint):
                    best = part
        return best.device if best else ""

    # Processes

    def processes(self) -> list[psutil.Process]:
        """List the process table; raises if it cannot be listed at all."""
        return list(psutil.process_iter())

    def process_name(self, proc: psutil.Process) -> str:
        return proc.name()

    def process_executable(self, proc: psutil.Process) -> str:
        return proc.exe()

    def process_username(self, proc: psutil.Process) -> str:
        return proc.username()

    def process_memory(self, proc: psutil.Process) -> MemoryStats:
        mem = proc.memory_info()
        return MemoryStats(rss=mem.rss, vms=mem.vms)

    # Network

    def interface_addresses(self) -> dict[str, list[Any]]:
        return psutil.net_if_addrs()

    def interface_stats(self) -> dict[str, Any]:
        return psutil.net_if_stats()

    def connections(self) -> list[Any]:
        return psutil.net_connections(kind="inet")

    def mac_address(self) -> str:
        """
        Hardware address of the interface carrying the local IPv4 address.

        The last non-loopback IPv4 address wins. Returns ``NULL_MAC`` when no
        such interface or no link-layer address is found.
        """
        addresses = self.interface_addresses()
        current = ""
        for name, addrs in addresses.items():
            for addr in addrs:
                if addr.family == socket.AF_INET and not addr.address.startswith("127."):
                    current = name
        if not current:
            return NULL_MAC
        for addr in addresses[current]:
            if addr.family == psutil.AF_LINK and addr.address:
                return normalize_mac(addr.address)
        return NULL_MAC
