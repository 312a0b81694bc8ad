"""Tests for network adapter and MAC address collection."""

import socket

import psutil
import pytest

from fakes import Addr, FakeProbe
from pysysinfo.errors import EnumerationError
from pysysinfo.include import Category
from pysysinfo.models import NetAdapterInfo, PortInfo
from pysysinfo.network import NetworkCollector, collect_net_adapters
from pysysinfo.probe import NULL_MAC, PlatformProbe, normalize_mac


def _by_ip(adapters):
    return {adapter.ip: adapter for adapter in adapters}


class TestNetworkCollector:
    def test_one_entry_per_ip_address(self):
        adapters = collect_net_adapters(FakeProbe())

        assert len(adapters) == 4
        assert set(_by_ip(adapters)) == {
            "127.0.0.1/8",
            "192.168.1.20/24",
            "fe80::1/64",
            "10.0.0.5/16",
        }

    def test_up_adapters_first(self):
        adapters = collect_net_adapters(FakeProbe())

        assert [a.is_up for a in adapters] == [True, True, True, False]
        # Interface order is kept within the up group
        assert [a.name for a in adapters] == ["lo", "eth0", "eth0", "wlan0"]

    def test_adapter_fields(self):
        eth0 = _by_ip(collect_net_adapters(FakeProbe()))["192.168.1.20/24"]

        assert eth0.name == "eth0"
        assert eth0.is_up is True
        assert eth0.is_ipv4 is True
        assert eth0.mac_addr == "aa:bb:cc:dd:ee:ff"

    def test_ports_for_up_ipv4_only(self):
        adapters = _by_ip(collect_net_adapters(FakeProbe()))

        assert adapters["fe80::1/64"].ports is None
        assert adapters["fe80::1/64"].is_ipv4 is False
        assert adapters["10.0.0.5/16"].ports is None
        assert adapters["192.168.1.20/24"].ports == (
            PortInfo(protocol="TCP", port=22, external_ip="*:*", state="LISTEN", pid=100),
            PortInfo(
                protocol="TCP",
                port=22,
                external_ip="192.168.1.7:51000",
                state="ESTABLISHED",
                pid=0,
            ),
        )
        assert adapters["127.0.0.1/8"].ports == (
            PortInfo(protocol="UDP", port=53, external_ip="*:*", state="", pid=200),
        )

    def test_connection_table_read_once(self):
        probe = FakeProbe()
        collect_net_adapters(probe)
        assert probe.calls["connections"] == 1

    def test_connections_unavailable(self):
        probe = FakeProbe(failing={"connections"})
        adapters = _by_ip(collect_net_adapters(probe))

        assert adapters["192.168.1.20/24"].ports == ()

    def test_stats_unavailable_reports_down(self):
        probe = FakeProbe(failing={"interface_stats"})
        adapters = collect_net_adapters(probe)

        assert all(not adapter.is_up for adapter in adapters)
        assert all(adapter.ports is None for adapter in adapters)

    def test_interface_enumeration_failure(self):
        probe = FakeProbe(failing={"interface_addresses"})

        with pytest.raises(EnumerationError) as excinfo:
            NetworkCollector(probe).collect()

        assert excinfo.value.category is Category.NETWORK_ADAPTERS
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_no_interfaces(self):
        probe = FakeProbe()
        probe.addresses = {}
        assert collect_net_adapters(probe) == ()

    def test_real_adapters(self):
        adapters = collect_net_adapters()
        assert isinstance(adapters, tuple)
        assert all(isinstance(adapter, NetAdapterInfo) for adapter in adapters)


class TestMacAddress:
    def test_last_non_loopback_ipv4_interface(self):
        assert FakeProbe().mac_address() == "11:22:33:44:55:66"

    def test_only_loopback(self):
        probe = FakeProbe()
        probe.addresses = {"lo": probe.addresses["lo"]}
        assert probe.mac_address() == NULL_MAC

    def test_interface_without_link_address(self):
        probe = FakeProbe()
        probe.addresses = {"tun0": [Addr(socket.AF_INET, "10.8.0.1", "255.255.255.0", None, None)]}
        assert probe.mac_address() == NULL_MAC

    def test_normalize_mac(self):
        assert normalize_mac("AA-BB-CC-00-11-22") == "aa:bb:cc:00:11:22"

    def test_real_mac_address_format(self):
        mac = PlatformProbe().mac_address()
        assert mac == NULL_MAC or ":" in mac


def test_link_family_is_not_an_adapter():
    probe = FakeProbe()
    probe.addresses = {"eth9": [Addr(psutil.AF_LINK, "aa:aa:aa:aa:aa:aa", None, None, None)]}
    assert collect_net_adapters(probe) == ()
