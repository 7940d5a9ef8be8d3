"""Tests for netmon.series."""

from __future__ import annotations

import pytest

from netmon.series import BoundedSeries


class TestWindow:
    def test_keeps_last_window_size_samples(self) -> None:
        s = BoundedSeries(5)
        for i in range(12):
            s.append(float(i))
        assert len(s) == 5
        assert s.windowed_view() == (7.0, 8.0, 9.0, 10.0, 11.0)

    def test_shorter_than_window(self) -> None:
        s = BoundedSeries(30)
        s.append(1.0)
        s.append(2.0)
        assert s.windowed_view() == (1.0, 2.0)
        assert s.window_size == 30

    def test_view_is_a_copy(self) -> None:
        s = BoundedSeries(3)
        s.append(1.0)
        view = s.windowed_view()
        s.append(2.0)
        assert view == (1.0,)

    def test_zero_window_rejected(self) -> None:
        with pytest.raises(ValueError):
            BoundedSeries(0)

    def test_idle_then_burst(self) -> None:
        s = BoundedSeries(3)
        for v in (0, 0, 0, 100):
            s.append(v)
        assert s.windowed_view() == (0, 0, 100)
        assert s.running_average() == 25


class TestAggregates:
    def test_running_average_covers_evicted_samples(self) -> None:
        s = BoundedSeries(2)
        values = [10.0, 20.0, 30.0, 40.0, 50.0]
        for v in values:
            s.append(v)
        assert s.running_average() == pytest.approx(sum(values) / len(values))
        assert s.total == pytest.approx(150.0)
        assert s.count == 5

    def test_running_average_empty(self) -> None:
        assert BoundedSeries(4).running_average() == 0.0

    def test_windowed_aggregates(self) -> None:
        s = BoundedSeries(3)
        for v in (100.0, 5.0, 7.0, 9.0):
            s.append(v)
        assert s.windowed_sum() == pytest.approx(21.0)
        assert s.windowed_max() == 9.0
        assert s.windowed_average() == pytest.approx(7.0)

    def test_windowed_aggregates_empty(self) -> None:
        s = BoundedSeries(3)
        assert s.windowed_sum() == 0.0
        assert s.windowed_max() == 0.0
        assert s.windowed_average() == 0.0
        assert s.latest == 0.0

    def test_latest(self) -> None:
        s = BoundedSeries(3)
        s.append(4.0)
        s.append(6.0)
        assert s.latest == 6.0


class TestMinMax:
    def test_unset_before_first_sample(self) -> None:
        s = BoundedSeries(3)
        assert s.minimum is None
        assert s.maximum is None

    def test_minimum_starts_at_first_sample(self) -> None:
        s = BoundedSeries(3)
        s.append(50.0)
        assert s.minimum == 50.0
        assert s.maximum == 50.0

    def test_tracks_whole_history(self) -> None:
        s = BoundedSeries(2)
        for v in (30.0, 5.0, 80.0, 40.0, 20.0):
            s.append(v)
        # 5 and 80 have left the window but still count
        assert s.minimum == 5.0
        assert s.maximum == 80.0

    def test_rising_then_falling(self) -> None:
        s = BoundedSeries(10)
        for v in (1.0, 2.0, 3.0, 2.5, 0.5):
            s.append(v)
        assert s.minimum == 0.5
        assert s.maximum == 3.0
