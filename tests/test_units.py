"""Tests for netmon.units."""

from __future__ import annotations

import math

import pytest

from netmon.units import UNIT_SUFFIXES, format_bytes, format_rate, pad

# ── format_bytes ───────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("value", "base", "expected"),
    [
        (0, 1000, "0 B"),
        (512, 1000, "512 B"),
        (1000, 1000, "1 KB"),
        (1500, 1000, "1.5 KB"),
        (1_234_567, 1000, "1.23 MB"),
        (1_000_000, 1000, "1 MB"),
        (10**9, 1000, "1 GB"),
        (10**12, 1000, "1 TB"),
        (1024, 1024, "1 KB"),
        (1536, 1024, "1.5 KB"),
        (1024**2, 1024, "1 MB"),
        (1000, 1024, "1000 B"),
        (10, 2, "1.25 GB"),
    ],
)
def test_format_bytes(value: float, base: int, expected: str) -> None:
    assert format_bytes(value, base) == expected


@pytest.mark.parametrize("base", [2, 10, 1000, 1024])
def test_zero_is_always_zero_bytes(base: int) -> None:
    assert format_bytes(0, base) == "0 B"


def test_fractional_bytes_clamp_to_bytes() -> None:
    # log of a value below 1 gives a negative magnitude
    assert format_bytes(0.5) == "0.5 B"
    assert format_bytes(0.001) == "0 B"


def test_huge_values_clamp_to_largest_unit() -> None:
    assert format_bytes(10**15) == "1000 TB"
    assert format_bytes(10**18) == "1000000 TB"


def test_infinity_does_not_raise() -> None:
    assert format_bytes(math.inf) == "inf TB"


def test_base_below_two_rejected() -> None:
    with pytest.raises(ValueError):
        format_bytes(100, 1)


@pytest.mark.parametrize("base", [1000, 1024])
@pytest.mark.parametrize("value", [1, 7, 999, 1001, 65_536, 3_210_987, 4.2e9, 8.8e12])
def test_displayed_value_scales_back(value: float, base: int) -> None:
    number, suffix = format_bytes(value, base).split(" ")
    i = UNIT_SUFFIXES.index(suffix)
    assert abs(float(number) * base**i - value) <= 0.005 * base**i


def test_format_rate() -> None:
    assert format_rate(1500) == "1.5 KB/s"
    assert format_rate(0, 1024) == "0 B/s"


# ── pad ────────────────────────────────────────────────────────────────────


def test_pad_fills_to_width() -> None:
    assert pad("0 B", 10) == "0 B       "
    assert len(pad("abc", 34)) == 34


def test_pad_custom_fill() -> None:
    assert pad("ab", 5, ".") == "ab..."


def test_pad_leaves_long_text() -> None:
    assert pad("a long label", 4) == "a long label"
