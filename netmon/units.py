"""Byte-count formatting and fixed-width padding for the dashboard text."""

from __future__ import annotations

import math

UNIT_SUFFIXES: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB")


def _magnitude(n: float, base: int) -> int:
    """Index into UNIT_SUFFIXES for *n*, clamped to the available units."""
    last = len(UNIT_SUFFIXES) - 1
    if math.isinf(n):
        return last
    i = math.floor(math.log(n) / math.log(base))
    i = max(0, min(i, last))
    # log ratios can land a hair off an exact power (log(1e6)/log(1e3) < 2)
    while i < last and n >= base ** (i + 1):
        i += 1
    while i > 0 and n < base**i:
        i -= 1
    return i


def format_bytes(n: float, base: int = 1000) -> str:
    """Human-readable byte count, e.g. ``1.5 KB`` for 1500 with base 1000.

    The value is rounded to two decimals and printed without trailing
    zeros. Zero is always ``"0 B"``.
    """
    if base < 2:
        raise ValueError(f"unit base must be >= 2, got {base}")
    if n == 0:
        return "0 B"
    i = _magnitude(n, base)
    value = f"{n / base**i:.2f}".rstrip("0").rstrip(".")
    return f"{value} {UNIT_SUFFIXES[i]}"


def format_rate(bps: float, base: int = 1000) -> str:
    """Human-readable transfer rate."""
    return f"{format_bytes(bps, base)}/s"


def pad(text: str, width: int, fill: str = " ") -> str:
    """Left-align *text* in a column of *width* characters."""
    if len(text) >= width:
        return text
    return text + fill * (width - len(text))
