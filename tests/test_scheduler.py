"""Unit tests for ScheduleLoop timing, driven by a fake clock."""

from datetime import datetime
from math import floor

import pytest

from speedlog.cycle import TickOutcome
from speedlog.models import MeasurementRecord
from speedlog.scheduler import ScheduleLoop


class FakeClock:
    """Clock whose sleep advances time instantly."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        assert seconds > 0
        self.sleeps.append(seconds)
        self.now += seconds


class StubCycle:
    """Cycle that advances the fake clock by a fixed measurement duration."""

    def __init__(self, clock, durations=(0.0,), fail_every=0, csv_ok=True, json_ok=True):
        self.clock = clock
        self.durations = list(durations)
        self.fail_every = fail_every
        self.csv_ok = csv_ok
        self.json_ok = json_ok
        self.calls = 0

    def run(self):
        self.calls += 1
        duration = self.durations[min(self.calls - 1, len(self.durations) - 1)]
        self.clock.now += duration
        ts = datetime(2024, 5, 1, 12, 0, 0)
        if self.fail_every and self.calls % self.fail_every == 0:
            record = MeasurementRecord.failed(ts, "pc")
        else:
            record = MeasurementRecord(timestamp=ts, host_identifier="pc", isp="ISP")
        return TickOutcome(record=record, csv_written=self.csv_ok, json_written=self.json_ok)


def make_loop(clock, cycle, duration, interval):
    return ScheduleLoop(cycle, duration_s=duration, interval_s=interval, clock=clock.time, sleep=clock.sleep)


class TestScheduleLoop:
    """Test suite for ScheduleLoop."""

    @pytest.mark.parametrize(
        "duration,interval",
        [(10, 2), (10, 3), (3600, 300), (100, 7), (60, 60), (59.5, 10)],
    )
    def test_tick_count_bounds(self, duration, interval):
        """floor(D/I) <= ticks <= floor(D/I) + 1, all starting before end_time."""
        clock = FakeClock()
        cycle = StubCycle(clock)
        loop = make_loop(clock, cycle, duration, interval)

        summary = loop.run()

        planned = floor(duration / interval)
        assert planned <= summary.ticks <= planned + 1
        assert summary.ticks == cycle.calls
        assert all(start < 1000.0 + duration for start in loop.tick_starts)

    def test_tick_count_bounds_with_measurement_time(self):
        """Measurement time does not change the tick count."""
        clock = FakeClock()
        cycle = StubCycle(clock, durations=(1.7,))
        summary = make_loop(clock, cycle, 600, 60).run()

        assert 10 <= summary.ticks <= 11

    def test_runs_once_when_duration_shorter_than_interval(self):
        """The body runs once and the loop sleeps only until end_time."""
        clock = FakeClock()
        cycle = StubCycle(clock)
        summary = make_loop(clock, cycle, 5, 60).run()

        assert summary.ticks == 1
        assert clock.now == pytest.approx(1005.0)

    def test_no_cumulative_drift(self):
        """Tick k starts at start + k*I even though each measurement takes time."""
        clock = FakeClock()
        cycle = StubCycle(clock, durations=(12.5, 3.0, 27.9, 0.01, 44.4))
        loop = make_loop(clock, cycle, 600, 60)

        loop.run()

        for k, start in enumerate(loop.tick_starts):
            assert abs(start - (1000.0 + k * 60)) < 0.05

    def test_overrun_starts_next_tick_immediately(self):
        """A tick longer than the interval re-anchors instead of catching up."""
        clock = FakeClock()
        cycle = StubCycle(clock, durations=(90.0, 1.0))
        loop = make_loop(clock, cycle, 300, 60)

        loop.run()

        assert loop.tick_starts[:3] == pytest.approx([1000.0, 1090.0, 1150.0])

    def test_never_sleeps_past_end_time(self):
        """The final sleep is clamped to end_time."""
        clock = FakeClock()
        cycle = StubCycle(clock, durations=(1.0,))
        make_loop(clock, cycle, 100, 30).run()

        assert clock.now == pytest.approx(1100.0)

    def test_stops_when_measurement_crosses_end_time(self):
        """A tick ending after end_time finishes the run without sleeping."""
        clock = FakeClock()
        cycle = StubCycle(clock, durations=(0.0, 0.0, 50.0))
        summary = make_loop(clock, cycle, 100, 30).run()

        assert summary.ticks == 3
        assert clock.now == pytest.approx(1110.0)

    def test_explicit_start_time(self):
        """The window can be anchored on a caller-supplied start time."""
        clock = FakeClock(start=500.0)
        cycle = StubCycle(clock)
        summary = make_loop(clock, cycle, 10, 5).run(start_time=500.0)

        assert summary.ticks == 2

    def test_summary_counts(self):
        """Failures and write failures are counted per tick."""
        clock = FakeClock()
        cycle = StubCycle(clock, fail_every=3, json_ok=False)
        summary = make_loop(clock, cycle, 60, 10).run()

        assert summary.ticks == 6
        assert summary.failed == 2
        assert summary.succeeded == 4
        assert summary.csv_write_failures == 0
        assert summary.json_write_failures == 6

    @pytest.mark.parametrize("duration,interval", [(0, 10), (10, 0), (-5, 1)])
    def test_rejects_non_positive_values(self, duration, interval):
        """Zero or negative durations and intervals are rejected."""
        clock = FakeClock()
        with pytest.raises(ValueError):
            make_loop(clock, StubCycle(clock), duration, interval)
