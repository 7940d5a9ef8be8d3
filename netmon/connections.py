"""Filtering, de-duplication and ranking of remote connections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from netmon.units import format_rate

# Plain prefix match, not CIDR: loopback, private and unspecified IPv4
# ranges, plus the leading ":" of "::" / "::1" style IPv6 addresses.
DEFAULT_LOCAL_PREFIXES: tuple[str, ...] = (
    "127.",
    "192.168.",
    "10.",
    "0.0.0.0",
    ":",
)


@dataclass(frozen=True)
class ConnectionRecord:
    """One remote endpoint as seen on one tick."""

    peer_address: str
    transmit_rate: float = 0.0
    receive_rate: float = 0.0
    process_id: int = 0

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> ConnectionRecord:
        """Build a record from a provider mapping, zeroing absent fields."""
        return cls(
            peer_address=str(raw.get("peer_address") or ""),
            transmit_rate=float(raw.get("transmit_rate") or 0.0),
            receive_rate=float(raw.get("receive_rate") or 0.0),
            process_id=int(raw.get("process_id") or 0),
        )

    @property
    def key(self) -> tuple[str, float, float]:
        """Duplicate key: the same peer with changed rates is kept apart."""
        return (self.peer_address, self.transmit_rate, self.receive_rate)

    @property
    def total_rate(self) -> float:
        return self.transmit_rate + self.receive_rate


def is_local(address: str, local_prefixes: Iterable[str]) -> bool:
    return any(address.startswith(prefix) for prefix in local_prefixes)


def rank(
    records: Iterable[ConnectionRecord],
    local_prefixes: Iterable[str] = DEFAULT_LOCAL_PREFIXES,
    max_peers: int = 10,
) -> list[ConnectionRecord]:
    """Top *max_peers* non-local connections by combined rate.

    Duplicates (same ``key``) collapse to the first one seen. Equal rates
    keep their encounter order.
    """
    if max_peers <= 0:
        return []
    prefixes = tuple(local_prefixes)

    unique: dict[tuple[str, float, float], ConnectionRecord] = {}
    for record in records:
        if is_local(record.peer_address, prefixes):
            continue
        unique.setdefault(record.key, record)

    ranked = sorted(unique.values(), key=lambda r: r.total_rate, reverse=True)
    return ranked[:max_peers]


def format_connection(record: ConnectionRecord, base: int = 1000) -> str:
    return (
        f"Connected IP: {record.peer_address}"
        f" - Transferred: {format_rate(record.transmit_rate, base)}"
        f" Received: {format_rate(record.receive_rate, base)}"
        f" - PID: {record.process_id}"
    )
