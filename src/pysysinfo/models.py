"""Data models for pysysinfo."""

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class MemoryStats:
    """Resident memory statistics of a single process."""

    rss: int  # Bytes
    vms: int  # Bytes


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable record of one process at snapshot time.

    Attributes that could not be read are left at their zero value.
    """

    pid: int
    name: str = ""
    executable: str = ""
    username: str = ""
    memory: MemoryStats | None = None


# Result of a process collection, keyed by pid.
ProcessSnapshot = dict[int, ProcessRecord]


@dataclass(slots=True, frozen=True)
class CPUCore:
    """Identity of one logical CPU."""

    cpu: int
    vendor_id: str = ""
    family: str = ""
    model: str = ""
    stepping: int = 0
    physical_id: str = ""
    core_id: str = ""
    cores: int = 0
    model_name: str = ""
    mhz: float = 0.0
    cache_size: int = 0
    flags: tuple[str, ...] = ()
    microcode: str = ""


@dataclass(slots=True, frozen=True)
class CPUInfo:
    """CPU identities plus the averaged usage over a short sample."""

    cpus: tuple[CPUCore, ...]
    current_usage: float  # 0.0 - 100.0

    @property
    def model_names(self) -> str:
        """Comma separated model names of all CPUs."""
        return ", ".join(cpu.model_name for cpu in self.cpus)


def _percent(used: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return used / total * 100


@dataclass(slots=True, frozen=True)
class RAMInfo:
    """Virtual memory totals in bytes."""

    total: int
    used: int
    free: int
    swap: int

    @property
    def used_percent(self) -> float:
        return _percent(self.used, self.total)


@dataclass(slots=True, frozen=True)
class DiskInfo:
    """Usage of the disk holding the configured path, in bytes."""

    sys_id: str
    path: str
    total: int
    used: int
    free: int

    @property
    def used_percent(self) -> float:
        return _percent(self.used, self.total)


@dataclass(slots=True, frozen=True)
class PortInfo:
    """A socket bound to an adapter address."""

    protocol: str  # 'TCP' or 'UDP'
    port: int
    external_ip: str
    state: str  # 'LISTEN', 'ESTABLISHED', 'TIME_WAIT', etc.
    pid: int


@dataclass(slots=True, frozen=True)
class NetAdapterInfo:
    """One address of a network interface."""

    name: str
    is_up: bool
    is_ipv4: bool
    ip: str  # CIDR notation
    mac_addr: str
    ports: tuple[PortInfo, ...] | None = None


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Snapshot of the local machine.

    Only the requested categories are populated; the rest stay ``None``.
    ``errors`` maps the value of every requested category whose collection
    failed to the failure message. It is a plain dict owned by the caller
    and takes no part in hashing.
    """

    hostname: str | None = None
    platform: str | None = None
    cpu: CPUInfo | None = None
    ram: RAMInfo | None = None
    disk: DiskInfo | None = None
    mac_address: str | None = None
    processes: tuple[ProcessRecord, ...] | None = None
    net_adapters: tuple[NetAdapterInfo, ...] | None = None
    errors: dict[str, str] = field(default_factory=dict, hash=False)
