"""Network adapter and bound-port collection."""

import ipaddress
import logging
import socket
from typing import Any

import psutil

from pysysinfo.errors import EnumerationError
from pysysinfo.include import Category
from pysysinfo.models import NetAdapterInfo, PortInfo
from pysysinfo.probe import PlatformProbe, normalize_mac

logger = logging.getLogger(__name__)

PROTOCOLS = {socket.SOCK_STREAM: "TCP", socket.SOCK_DGRAM: "UDP"}


def _cidr(address: str, netmask: str | None) -> str:
    """Render an interface address with its prefix length, e.g. '10.0.0.2/24'."""
    address = address.split("%", 1)[0]  # Strip IPv6 zone index
    if not netmask:
        return address
    try:
        prefix = bin(int(ipaddress.ip_address(netmask))).count("1")
    except ValueError:
        return address
    return f"{address}/{prefix}"


def _endpoint(addr: Any) -> str:
    if not addr:
        return "*:*"
    return f"{addr.ip}:{addr.port}"


def _to_port(conn: Any) -> PortInfo:
    state = conn.status if conn.status != psutil.CONN_NONE else ""
    return PortInfo(
        protocol=PROTOCOLS.get(conn.type, str(conn.type)),
        port=conn.laddr.port,
        external_ip=_endpoint(conn.raddr),
        state=state,
        pid=conn.pid or 0,
    )


class NetworkCollector:
    """Lists interface addresses and the sockets bound to each up IPv4 address."""

    def __init__(self, probe: PlatformProbe | None = None) -> None:
        self._probe = probe or PlatformProbe()

    def collect(self) -> tuple[NetAdapterInfo, ...]:
        """
        Collect one NetAdapterInfo per interface address, up adapters first.

        Raises:
            EnumerationError: If the interface list could not be read.
        """
        try:
            addresses = self._probe.interface_addresses()
        except Exception as exc:
            raise EnumerationError(
                Category.NETWORK_ADAPTERS, f"Could not enumerate interfaces: {exc}"
            ) from exc

        try:
            stats = self._probe.interface_stats()
        except Exception as exc:
            logger.warning(f"Interface state unavailable, reporting all as down: {exc}")
            stats = {}

        connections: list[Any] | None = None
        adapters: list[NetAdapterInfo] = []
        for name, addrs in addresses.items():
            mac = ""
            for addr in addrs:
                if addr.family == psutil.AF_LINK and addr.address:
                    mac = normalize_mac(addr.address)

            is_up = bool(getattr(stats.get(name), "isup", False))
            for addr in addrs:
                if addr.family not in (socket.AF_INET, socket.AF_INET6):
                    continue
                is_ipv4 = addr.family == socket.AF_INET
                ports = None
                if is_up and is_ipv4:
                    if connections is None:
                        connections = self._connections()
                    ports = tuple(
                        _to_port(conn)
                        for conn in connections
                        if conn.laddr and conn.laddr.ip == addr.address
                    )
                adapters.append(
                    NetAdapterInfo(
                        name=name,
                        is_up=is_up,
                        is_ipv4=is_ipv4,
                        ip=_cidr(addr.address, addr.netmask),
                        mac_addr=mac,
                        ports=ports,
                    )
                )

        # Stable sort keeps the interface order within each group
        adapters.sort(key=lambda adapter: not adapter.is_up)
        return tuple(adapters)

    def _connections(self) -> list[Any]:
        try:
            return list(self._probe.connections())
        except Exception as exc:
            logger.warning(f"Connection table unavailable, ports left empty: {exc}")
            return []


def collect_net_adapters(probe: PlatformProbe | None = None) -> tuple[NetAdapterInfo, ...]:
    """Collect network adapters; see NetworkCollector."""
    return NetworkCollector(probe).collect()
