"""pysysinfo - Textual snapshot viewer."""

import logging
import threading
from collections.abc import Iterable
from enum import Enum
from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import DataTable, Footer, Static

from pysysinfo.collector import SystemCollector
from pysysinfo.include import Category
from pysysinfo.models import NetAdapterInfo, ProcessRecord, SystemSnapshot
from pysysinfo.render import format_bytes, format_gb

logger = logging.getLogger(__name__)


class SortKey(Enum):
    """Sort keys for the process table."""

    MEM = "mem"
    PID = "pid"
    NAME = "name"
    USER = "user"


def usage_bar(percent: float, color: str, width: int = 20) -> str:
    """Render a percentage as a fixed-width bar."""
    filled = min(int(percent / (100 / width)), width)
    return f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (width - filled)


class HeaderStats(Static):
    """Header widget showing host, CPU, memory and disk summaries."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        min-height: 5;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._snapshot: SystemSnapshot | None = None

    def compose(self) -> ComposeResult:
        yield Horizontal(
            Static(self._get_host_info(), id="host-info"),
            Static(self._get_usage_info(), id="usage-info"),
        )

    def update_stats(self, snapshot: SystemSnapshot) -> None:
        """Show the given snapshot."""
        self._snapshot = snapshot
        try:
            self.query_one("#host-info", Static).update(self._get_host_info())
            self.query_one("#usage-info", Static).update(self._get_usage_info())
        except NoMatches:
            pass  # Not mounted yet

    def _get_host_info(self) -> str:
        snapshot = self._snapshot
        if snapshot is None:
            return "Collecting system info..."
        lines = [
            f"Host: {snapshot.hostname or '-'}",
            f"Platform: {snapshot.platform or '-'}",
            f"MAC: {snapshot.mac_address or '-'}",
        ]
        if snapshot.cpu is not None:
            lines.append(f"CPU: {snapshot.cpu.model_names or '-'}")
        if snapshot.errors:
            lines.append(f"[red]Failed: {', '.join(snapshot.errors)}[/red]")
        return "\n".join(lines)

    def _get_usage_info(self) -> str:
        snapshot = self._snapshot
        if snapshot is None:
            return ""
        lines = []
        if snapshot.cpu is not None:
            usage = snapshot.cpu.current_usage
            lines.append(f"CPU \\[{usage_bar(usage, 'green')}] {usage:5.1f}%")
        if snapshot.ram is not None:
            ram = snapshot.ram
            lines.append(
                f"Mem \\[{usage_bar(ram.used_percent, 'cyan')}] "
                f"{format_gb(ram.used)}/{format_gb(ram.total)}"
            )
        if snapshot.disk is not None:
            disk = snapshot.disk
            lines.append(
                f"Dsk \\[{usage_bar(disk.used_percent, 'yellow')}] "
                f"{format_gb(disk.used)}/{format_gb(disk.total)}"
            )
        return "\n".join(lines)


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 2fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._processes: tuple[ProcessRecord, ...] = ()
        self._sort_key: SortKey = SortKey.MEM
        self._sort_reverse: bool = True

    @property
    def sort_key(self) -> SortKey:
        return self._sort_key

    def cycle_sort(self) -> SortKey:
        """Cycle to the next sort key, re-sort and return it."""
        keys = list(SortKey)
        self._sort_key = keys[(keys.index(self._sort_key) + 1) % len(keys)]
        self._sort_reverse = self._sort_key is SortKey.MEM
        self.update_processes(self._processes)
        return self._sort_key

    def compose(self) -> ComposeResult:
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"
        table.add_column("PID", key="pid", width=8)
        table.add_column("USER", key="user", width=12)
        table.add_column("RES", key="rss", width=8)
        table.add_column("NAME", key="name", width=20)
        table.add_column("Executable", key="executable")

    def update_processes(self, processes: Iterable[ProcessRecord]) -> None:
        """Replace the table contents with the given records."""
        self._processes = tuple(processes)
        table = self.query_one("#process-table", DataTable)
        table.clear()
        for proc in self.sort_processes(self._processes):
            table.add_row(
                str(proc.pid),
                proc.username[:12],
                format_bytes(proc.memory.rss) if proc.memory else "    -",
                proc.name[:20],
                proc.executable,
                key=str(proc.pid),
            )

    def sort_processes(self, processes: Iterable[ProcessRecord]) -> list[ProcessRecord]:
        key_func = {
            SortKey.MEM: lambda p: p.memory.rss if p.memory else 0,
            SortKey.PID: lambda p: p.pid,
            SortKey.NAME: lambda p: p.name.lower(),
            SortKey.USER: lambda p: p.username.lower(),
        }
        return sorted(processes, key=key_func[self._sort_key], reverse=self._sort_reverse)


class AdapterTable(Container):
    """Container for the network adapter table."""

    DEFAULT_CSS = """
    AdapterTable {
        height: 1fr;
        border: solid $secondary;
    }
    """

    def compose(self) -> ComposeResult:
        yield DataTable(id="adapter-table")

    def on_mount(self) -> None:
        table = self.query_one("#adapter-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Name", key="name", width=16)
        table.add_column("Up", key="up", width=5)
        table.add_column("IP", key="ip", width=40)
        table.add_column("MAC", key="mac", width=18)
        table.add_column("Ports", key="ports")

    def update_adapters(self, adapters: Iterable[NetAdapterInfo]) -> None:
        table = self.query_one("#adapter-table", DataTable)
        table.clear()
        for adapter in adapters:
            ports = "-" if adapter.ports is None else str(len(adapter.ports))
            table.add_row(
                adapter.name,
                "yes" if adapter.is_up else "no",
                adapter.ip,
                adapter.mac_addr,
                ports,
            )


class SysInfoApp(App):
    """Viewer for one system snapshot, refreshed on demand."""

    TITLE = "pysysinfo"
    SUB_TITLE = "System Snapshot"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header-stats {
        dock: top;
        height: auto;
        min-height: 6;
    }

    Horizontal {
        height: auto;
    }

    #host-info {
        width: 1fr;
        padding-right: 2;
    }

    #usage-info {
        width: 1fr;
        padding-left: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "collect", "Refresh"),
        ("f6", "sort", "Sort"),
    ]

    def __init__(
        self,
        collector: SystemCollector | None = None,
        include: Iterable[Category] = (),
    ) -> None:
        super().__init__()
        self._collector = collector or SystemCollector()
        self._include = tuple(include)
        self._update_queue: Queue[SystemSnapshot] = Queue()
        self._worker: threading.Thread | None = None

    @property
    def is_collecting(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def compose(self) -> ComposeResult:
        yield HeaderStats(id="header-stats")
        yield ProcessTable()
        yield AdapterTable()
        yield Footer()

    def on_mount(self) -> None:
        self.action_collect()
        self.set_interval(0.25, self._check_for_updates)

    def action_collect(self) -> None:
        """Collect a new snapshot in a background thread."""
        if self.is_collecting:
            return
        self._worker = threading.Thread(
            target=self._collect,
            daemon=True,
            name="SnapshotCollector",
        )
        self._worker.start()

    def _collect(self) -> None:
        try:
            self._update_queue.put(self._collector.collect(self._include))
        except Exception:
            logger.exception("Snapshot collection failed")

    def _check_for_updates(self) -> None:
        """Show the most recent snapshot waiting in the queue, if any."""
        snapshot = None
        while True:
            try:
                snapshot = self._update_queue.get_nowait()
            except Empty:
                break
        if snapshot is not None:
            self.show_snapshot(snapshot)

    def show_snapshot(self, snapshot: SystemSnapshot) -> None:
        self.query_one("#header-stats", HeaderStats).update_stats(snapshot)
        self.query_one(ProcessTable).update_processes(snapshot.processes or ())
        self.query_one(AdapterTable).update_adapters(snapshot.net_adapters or ())

    def action_sort(self) -> None:
        new_sort_key = self.query_one(ProcessTable).cycle_sort()
        self.notify(f"Sort: {new_sort_key.value.upper()}")
