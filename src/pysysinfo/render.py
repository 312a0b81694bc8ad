"""Human-readable rendering of system snapshots."""

from typing import Any

from pysysinfo.config import RenderConfig
from pysysinfo.models import SystemSnapshot

EMPTY_VALUES = {"", "0", "[]", "{}", "()"}


def format_gb(size: int) -> str:
    """Format bytes as gigabytes with two decimals."""
    return f"{size / 1024**3:.2f} GB"


def format_bytes(size: int) -> str:
    """Format bytes as a short human-readable string."""
    for unit in ["B", "K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:5.1f}{unit}" if unit != "B" else f"{size:5d}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(str(v) for v in value) + "]"
    return str(value)


class _Writer:
    """Accumulates indented ``name: value`` lines."""

    def __init__(self, config: RenderConfig) -> None:
        self.verbose = config.verbose
        self._parts: list[str] = []

    def raw(self, text: str) -> None:
        self._parts.append(text)

    def field(self, indent: int, name: str, value: Any, null_value: str | None = None) -> None:
        text = _stringify(value).strip()
        if text in EMPTY_VALUES:
            text = null_value if null_value is not None else f"No {name} detected"
        self._parts.append("\t" * indent + f"{name}: {text}\n")

    def verbose_field(self, indent: int, name: str, value: Any, null_value: str | None = None) -> None:
        if self.verbose:
            self.field(indent, name, value, null_value)

    def text(self) -> str:
        return "".join(self._parts)


def render(snapshot: SystemSnapshot, config: RenderConfig | None = None) -> str:
    """
    Render a snapshot as indented text.

    Categories that were not collected are skipped, except hostname and
    platform which always have a heading. ``config.verbose`` adds per-item
    detail.
    """
    w = _Writer(config or RenderConfig())

    w.raw(f"Hostname:\n\t{snapshot.hostname or ''}\n")
    w.raw(f"Platform:\n\t{snapshot.platform or ''}\n")

    if snapshot.cpu is not None:
        w.raw("CPU:\n")
        w.field(1, "Current Usage", snapshot.cpu.current_usage)
        for cpu in snapshot.cpu.cpus:
            w.field(1, "ModelName", cpu.model_name)
            w.field(1, "Cores", cpu.cores)
            w.verbose_field(1, "CPU", cpu.cpu)
            w.verbose_field(1, "VendorID", cpu.vendor_id)
            w.verbose_field(1, "Family", cpu.family)
            w.verbose_field(1, "Model", cpu.model)
            w.verbose_field(1, "Stepping", cpu.stepping)
            w.verbose_field(1, "PhysicalID", cpu.physical_id)
            w.verbose_field(1, "CoreID", cpu.core_id)
            w.verbose_field(1, "Mhz", cpu.mhz)
            w.verbose_field(1, "CacheSize", cpu.cache_size)
            w.verbose_field(1, "Flags", cpu.flags)
            w.verbose_field(1, "Microcode", cpu.microcode)

    if snapshot.ram is not None:
        ram = snapshot.ram
        w.raw("RAM:\n")
        w.field(1, "Percentage Used", ram.used_percent)
        w.verbose_field(1, "Total", format_gb(ram.total), "null")
        w.verbose_field(1, "Used", format_gb(ram.used), "null")
        w.verbose_field(1, "Free", format_gb(ram.free), "null")
        w.verbose_field(1, "Swap", format_gb(ram.swap), "null")

    if snapshot.disk is not None:
        disk = snapshot.disk
        w.raw("Disk:\n")
        if w.verbose:
            if disk.sys_id and disk.path:
                w.field(1, "SysID", f"{disk.sys_id} ({disk.path})")
            elif disk.sys_id:
                w.field(1, "SysID", disk.sys_id)
            elif disk.path:
                w.field(1, "Path", disk.path)
        w.verbose_field(1, "Used Percentage", disk.used_percent)
        w.verbose_field(1, "Total", format_gb(disk.total), "null")
        w.field(1, "Used", format_gb(disk.used), "null")
        w.verbose_field(1, "Free", format_gb(disk.free), "null")

    if snapshot.mac_address is not None:
        w.raw("MAC Address:\n")
        w.raw(f"\t{snapshot.mac_address}\n")

    if snapshot.processes is not None:
        if w.verbose:
            w.raw("Processes:\n")
            for proc in snapshot.processes:
                w.field(1, f"({proc.pid}) {proc.name}", proc.executable, "")
        else:
            w.raw(f"Processes: {len(snapshot.processes)}\n")

    if snapshot.net_adapters is not None:
        w.raw(f"Network Adapters: {len(snapshot.net_adapters)}\n")
        for adapter in snapshot.net_adapters:
            ports = adapter.ports or ()
            w.field(1, "Name", adapter.name)
            w.field(1, "IsUp", adapter.is_up)
            w.field(1, "IsIpv4", adapter.is_ipv4)
            w.verbose_field(1, "IP", adapter.ip, "error fetching IP")
            w.verbose_field(1, "MacAddr", adapter.mac_addr, "no MAC address found")
            if w.verbose:
                for port in ports:
                    w.field(2, "Protocol", port.protocol)
                    w.field(2, "Port", port.port)
                    w.field(2, "State", port.state, "unknown")
                    w.field(2, "PID", port.pid)
                    w.raw("\n")
            else:
                w.field(1, "Ports", len(ports), "0")
            w.raw("\n")

    if snapshot.errors:
        w.raw("Errors:\n")
        for category, message in snapshot.errors.items():
            w.field(1, category, message)

    return w.text()
