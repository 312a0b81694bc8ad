"""JSON encoding and decoding of system snapshots.

Categories that were not collected are omitted from the encoded form.
"""

import json
from dataclasses import asdict
from typing import Any

from pysysinfo.errors import SnapshotDecodeError
from pysysinfo.models import (
    CPUCore,
    CPUInfo,
    DiskInfo,
    MemoryStats,
    NetAdapterInfo,
    PortInfo,
    ProcessRecord,
    RAMInfo,
    SystemSnapshot,
)


def _prune(value: Any) -> Any:
    """Drop None values from nested dicts, keeping list positions."""
    if isinstance(value, dict):
        return {k: _prune(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_prune(v) for v in value]
    return value


def to_dict(snapshot: SystemSnapshot) -> dict[str, Any]:
    """Convert a snapshot to plain JSON-compatible data."""
    data = _prune(asdict(snapshot))
    if not data.get("errors"):
        data.pop("errors", None)
    return data


def to_json(snapshot: SystemSnapshot, indent: int | None = 2) -> str:
    return json.dumps(to_dict(snapshot), indent=indent)


def _process(data: dict[str, Any]) -> ProcessRecord:
    memory = data.get("memory")
    return ProcessRecord(
        pid=data["pid"],
        name=data.get("name", ""),
        executable=data.get("executable", ""),
        username=data.get("username", ""),
        memory=MemoryStats(**memory) if memory is not None else None,
    )


def _cpu(data: dict[str, Any]) -> CPUInfo:
    cpus = []
    for core in data.get("cpus", []):
        core = dict(core)
        core["flags"] = tuple(core.get("flags", ()))
        cpus.append(CPUCore(**core))
    return CPUInfo(cpus=tuple(cpus), current_usage=data.get("current_usage", 0.0))


def _adapter(data: dict[str, Any]) -> NetAdapterInfo:
    ports = data.get("ports")
    return NetAdapterInfo(
        name=data["name"],
        is_up=data["is_up"],
        is_ipv4=data["is_ipv4"],
        ip=data["ip"],
        mac_addr=data.get("mac_addr", ""),
        ports=tuple(PortInfo(**port) for port in ports) if ports is not None else None,
    )


def from_dict(data: dict[str, Any]) -> SystemSnapshot:
    """
    Rebuild a snapshot from data produced by ``to_dict``.

    Raises:
        SnapshotDecodeError: If the data does not describe a snapshot.
    """
    if not isinstance(data, dict):
        raise SnapshotDecodeError(f"Expected an object, got {type(data).__name__}")
    try:
        procs = data.get("processes")
        adapters = data.get("net_adapters")
        return SystemSnapshot(
            hostname=data.get("hostname"),
            platform=data.get("platform"),
            cpu=_cpu(data["cpu"]) if data.get("cpu") is not None else None,
            ram=RAMInfo(**data["ram"]) if data.get("ram") is not None else None,
            disk=DiskInfo(**data["disk"]) if data.get("disk") is not None else None,
            mac_address=data.get("mac_address"),
            processes=tuple(_process(p) for p in procs) if procs is not None else None,
            net_adapters=tuple(_adapter(a) for a in adapters) if adapters is not None else None,
            errors=dict(data.get("errors") or {}),
        )
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise SnapshotDecodeError(f"Malformed snapshot data: {e!r}") from e


def from_json(text: str | bytes) -> SystemSnapshot:
    try:
        data = json.loads(text)
    except ValueError as e:  # JSONDecodeError and UnicodeDecodeError
        raise SnapshotDecodeError(f"Invalid JSON: {e}") from e
    return from_dict(data)
