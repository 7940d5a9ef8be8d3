"""Live terminal dashboard: interface throughput graph and top remote peers.

Every tick pulls one snapshot from the metrics provider, advances the
receive/transmit histories, and redraws one full-screen text frame.

Usage:
    uv run netmon
    uv run netmon --seconds=60 --size=1024 --maxPeers=5 --config=path/to/config.toml
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Protocol, TextIO

from netmon.config import (
    ConfigError,
    Options,
    build_parser,
    dump_default_config,
    parse_flags,
)
from netmon.connections import ConnectionRecord, format_connection, rank
from netmon.graph import GRAPH_HEIGHT, Symbols, format_graph, legend, render
from netmon.provider import (
    InterfaceStats,
    MetricsProvider,
    ProviderUnavailable,
    PsutilProvider,
)
from netmon.series import BoundedSeries
from netmon.units import format_bytes, format_rate, pad

COLUMN_WIDTH = 34
CLEAR_SCREEN = "\033[H\033[J"


# ── Output sinks ───────────────────────────────────────────────────────────


class OutputSink(Protocol):
    def write(self, frame: str) -> None: ...


class TerminalSink:
    """Redraws the whole screen with each frame."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write(self, frame: str) -> None:
        self.stream.write(CLEAR_SCREEN + frame + "\n")
        self.stream.flush()


@dataclass
class ListSink:
    """Keeps every frame in memory."""

    frames: list[str] = field(default_factory=lambda: list[str]())

    def write(self, frame: str) -> None:
        self.frames.append(frame)


# ── State ──────────────────────────────────────────────────────────────────


@dataclass
class DashboardState:
    """History carried from one tick to the next."""

    rx: BoundedSeries
    tx: BoundedSeries
    ticks: int = 0
    last_frame: str | None = None

    @classmethod
    def create(cls, window_size: int) -> DashboardState:
        return cls(rx=BoundedSeries(window_size), tx=BoundedSeries(window_size))


# ── Dashboard ──────────────────────────────────────────────────────────────


class Dashboard:
    def __init__(
        self,
        provider: MetricsProvider,
        sink: OutputSink,
        options: Options | None = None,
    ) -> None:
        self.provider = provider
        self.sink = sink
        self.options = options if options is not None else Options()
        self.symbols = Symbols(
            receive=self.options.rx_symbol,
            transmit=self.options.tx_symbol,
            both=self.options.both_symbol,
        )
        self.state = DashboardState.create(self.options.seconds)

    def tick(self) -> str | None:
        """Sample, render and write one frame.

        Returns the frame, or None when the provider failed and the tick
        was skipped. A skipped tick leaves the history and the screen as
        they were.
        """
        try:
            stats = self.provider.fetch_interface_stats(self.options.interface)
            raw_connections = self.provider.fetch_active_connections()
        except ProviderUnavailable as e:
            print(f"netmon: tick skipped: {e}", file=sys.stderr)
            return None

        self.state.rx.append(stats.receive_rate)
        self.state.tx.append(stats.transmit_rate)
        self.state.ticks += 1

        ranked = rank(raw_connections, self.options.local_prefixes, self.options.max_peers)
        frame = self.compose_frame(stats, ranked)
        self.sink.write(frame)
        self.state.last_frame = frame
        return frame

    def compose_frame(self, stats: InterfaceStats, ranked: list[ConnectionRecord]) -> str:
        base = self.options.size
        rx, tx = self.state.rx, self.state.tx

        def row(label: str, rx_text: str, tx_text: str) -> str:
            return pad(f"  {label}: {rx_text}", COLUMN_WIDTH) + tx_text

        lines = [
            f"Interface: {stats.name}",
            pad("Received:", COLUMN_WIDTH) + "Transferred:",
            row(
                "Total",
                format_bytes(stats.total_received_bytes, base),
                format_bytes(stats.total_transmitted_bytes, base),
            ),
            row("Running", format_bytes(rx.total, base), format_bytes(tx.total, base)),
            row(
                "Window",
                format_bytes(rx.windowed_sum(), base),
                format_bytes(tx.windowed_sum(), base),
            ),
            row("Current", format_rate(rx.latest, base), format_rate(tx.latest, base)),
            row(
                "Average",
                format_rate(rx.running_average(), base),
                format_rate(tx.running_average(), base),
            ),
            row(
                "Min",
                format_rate(rx.minimum or 0.0, base),
                format_rate(tx.minimum or 0.0, base),
            ),
            row(
                "Max",
                format_rate(rx.maximum or 0.0, base),
                format_rate(tx.maximum or 0.0, base),
            ),
        ]

        grid, thresholds = render(rx, tx, GRAPH_HEIGHT)
        lines.extend(format_graph(grid, thresholds, self.symbols, base))
        lines.append(legend(self.symbols))
        lines.extend(format_connection(record, base) for record in ranked)

        if self.options.debug:
            lines.extend(
                [
                    "DEBUG",
                    f"rx: {list(rx.windowed_view())}",
                    f"tx: {list(tx.windowed_view())}",
                    f"interface: {stats}",
                    f"ms: {int(time.time() * 1000) % 1000}",
                ]
            )
        return "\n".join(lines)

    def run(self, max_ticks: int | None = None) -> None:
        """Tick on a fixed schedule until interrupted (or *max_ticks* ticks).

        Ticks never overlap. When a tick overruns its slot the missed
        deadlines are dropped rather than replayed back to back.
        """
        interval = self.options.tick_interval_ms / 1000.0
        next_tick = time.monotonic()
        done = 0
        try:
            while max_ticks is None or done < max_ticks:
                self.tick()
                done += 1
                if max_ticks is not None and done >= max_ticks:
                    break
                next_tick += interval
                now = time.monotonic()
                if next_tick <= now:
                    next_tick = now + interval
                time.sleep(next_tick - now)
        except KeyboardInterrupt:
            pass


# ── CLI entry point ────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    try:
        options, dump = parse_flags(argv)
    except ConfigError as e:
        print(f"netmon: {e}", file=sys.stderr)
        print(build_parser().format_help(), file=sys.stderr)
        return 1

    if dump:
        print(dump_default_config(), end="")
        return 0

    dashboard = Dashboard(PsutilProvider(), TerminalSink(), options)
    dashboard.run()
    print("\nnetmon: stopped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
