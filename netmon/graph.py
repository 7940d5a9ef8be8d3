"""Overlay graph of receive/transmit history as a character grid.

Each row of the grid has a threshold; a cell is drawn when the column's
sample reaches the row threshold. Receive and transmit share the grid, so
a cell reached by both series gets the combined symbol.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from netmon.series import BoundedSeries
from netmon.units import format_bytes, pad

GRAPH_HEIGHT = 12
LABEL_WIDTH = 10


class RenderInvariantViolation(RuntimeError):
    """The two series fed to the renderer are out of step."""


class Cell(enum.Enum):
    BLANK = "blank"
    RECEIVE = "receive"
    TRANSMIT = "transmit"
    BOTH = "both"


@dataclass(frozen=True)
class Symbols:
    """Glyph used for each kind of cell."""

    receive: str = "@"
    transmit: str = "#"
    both: str = "*"
    blank: str = " "

    def glyph(self, cell: Cell) -> str:
        return {
            Cell.BLANK: self.blank,
            Cell.RECEIVE: self.receive,
            Cell.TRANSMIT: self.transmit,
            Cell.BOTH: self.both,
        }[cell]


@dataclass
class GraphGrid:
    rows: list[list[Cell]]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def column(self, j: int) -> list[Cell]:
        return [row[j] for row in self.rows]


# ── Rendering ──────────────────────────────────────────────────────────────


def row_thresholds(scale: float, height: int) -> list[float]:
    """Threshold per row, top to bottom. The bottom row is exactly 0."""
    step = scale / height
    thresholds = [scale - step * (r + 1) for r in range(height - 1)]
    thresholds.append(0.0)
    return thresholds


def _classify(rx: float, tx: float, threshold: float) -> Cell:
    rx_hit = rx >= threshold
    tx_hit = tx >= threshold
    if rx_hit and tx_hit:
        return Cell.BOTH
    if rx_hit:
        return Cell.RECEIVE
    if tx_hit:
        return Cell.TRANSMIT
    return Cell.BLANK


def render(
    rx_series: BoundedSeries,
    tx_series: BoundedSeries,
    height: int = GRAPH_HEIGHT,
) -> tuple[GraphGrid, list[float]]:
    """Build the overlay grid and the row thresholds for two series.

    The grid is ``height`` rows by ``window_size`` columns. When the window
    is not yet full the samples are right-aligned and the leading columns
    stay blank.

    Raises:
        RenderInvariantViolation: If the series differ in capacity or in
            current length, or if *height* is not positive.
    """
    if height < 1:
        raise RenderInvariantViolation(f"graph height must be >= 1, got {height}")
    if rx_series.window_size != tx_series.window_size:
        raise RenderInvariantViolation(
            f"window sizes differ: rx={rx_series.window_size} "
            f"tx={tx_series.window_size}"
        )
    rx = rx_series.windowed_view()
    tx = tx_series.windowed_view()
    if len(rx) != len(tx):
        raise RenderInvariantViolation(
            f"series lengths differ: rx={len(rx)} tx={len(tx)}"
        )

    width = rx_series.window_size
    offset = width - len(rx)
    scale = max(rx_series.windowed_max(), tx_series.windowed_max())
    thresholds = row_thresholds(scale, height)

    rows: list[list[Cell]] = []
    for threshold in thresholds:
        row = [Cell.BLANK] * offset
        row.extend(_classify(r, t, threshold) for r, t in zip(rx, tx))
        rows.append(row)
    return GraphGrid(rows), thresholds


# ── Text output ────────────────────────────────────────────────────────────


def format_graph(
    grid: GraphGrid,
    thresholds: list[float],
    symbols: Symbols,
    base: int = 1000,
    label_width: int = LABEL_WIDTH,
) -> list[str]:
    """One text line per grid row: padded axis label, separator, cells."""
    lines: list[str] = []
    for threshold, row in zip(thresholds, grid.rows):
        label = pad(format_bytes(threshold, base), label_width)
        cells = "".join(symbols.glyph(cell) for cell in row)
        lines.append(f"{label} | {cells}")
    return lines


def legend(symbols: Symbols) -> str:
    return (
        f" '{symbols.receive}' Received, '{symbols.transmit}' Transferred,"
        f" '{symbols.both}' Both"
    )
