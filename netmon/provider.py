"""Metrics acquisition: interface counters and remote connections via psutil.

The dashboard only depends on the ``MetricsProvider`` protocol; the psutil
implementation here is what the CLI plugs in.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import psutil

from netmon.connections import ConnectionRecord


class ProviderUnavailable(Exception):
    """The metrics source could not be queried for this tick."""


@dataclass(frozen=True)
class InterfaceStats:
    """Counters and current rates for one network interface."""

    name: str
    total_received_bytes: int = 0
    total_transmitted_bytes: int = 0
    receive_rate: float = 0.0
    transmit_rate: float = 0.0


class MetricsProvider(Protocol):
    def fetch_interface_stats(self, interface_index: int) -> InterfaceStats: ...

    def fetch_active_connections(self) -> list[ConnectionRecord]: ...


class PsutilProvider:
    """Reads per-NIC counters and inet sockets from psutil.

    Rates are counter deltas between consecutive calls, so the first call
    for an interface reports 0 B/s.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        # nic name -> (clock time, bytes_recv, bytes_sent)
        self._prev: dict[str, tuple[float, int, int]] = {}

    def fetch_interface_stats(self, interface_index: int) -> InterfaceStats:
        try:
            counters = psutil.net_io_counters(pernic=True)
        except (psutil.Error, OSError) as e:
            raise ProviderUnavailable(f"cannot read interface counters: {e}") from e
        if not counters:
            raise ProviderUnavailable("no network interfaces reported")

        names = list(counters)
        if not 0 <= interface_index < len(names):
            raise ProviderUnavailable(
                f"interface index {interface_index} out of range "
                f"({len(names)} interfaces)"
            )
        name = names[interface_index]
        nic = counters[name]
        now = self._clock()

        rx_rate = tx_rate = 0.0
        prev = self._prev.get(name)
        if prev is not None and now > prev[0]:
            dt = now - prev[0]
            # Counter reset or wrap clamps to 0 rather than going negative
            rx_rate = max(0.0, (nic.bytes_recv - prev[1]) / dt)
            tx_rate = max(0.0, (nic.bytes_sent - prev[2]) / dt)
        self._prev[name] = (now, nic.bytes_recv, nic.bytes_sent)

        return InterfaceStats(
            name=name,
            total_received_bytes=nic.bytes_recv,
            total_transmitted_bytes=nic.bytes_sent,
            receive_rate=rx_rate,
            transmit_rate=tx_rate,
        )

    def fetch_active_connections(self) -> list[ConnectionRecord]:
        try:
            conns = psutil.net_connections(kind="inet")
        except (psutil.Error, OSError) as e:
            raise ProviderUnavailable(f"cannot list connections: {e}") from e

        records: list[ConnectionRecord] = []
        for conn in conns:
            if not conn.raddr:
                continue  # listening or unconnected socket
            # psutil has no per-socket throughput; rates stay absent
            records.append(
                ConnectionRecord.from_raw(
                    {"peer_address": conn.raddr.ip, "process_id": conn.pid}
                )
            )
        return records
