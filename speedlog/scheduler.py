"""Fixed-interval scheduling loop over a bounded run window."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from speedlog.cycle import MeasurementCycle
from speedlog.models import RunWindow

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counters for a finished run."""

    ticks: int = 0
    succeeded: int = 0
    failed: int = 0
    csv_write_failures: int = 0
    json_write_failures: int = 0


class ScheduleLoop:
    """Drives measurement ticks until the run window closes.

    Key behavior:
    - The body runs at least once, even when the window is shorter than
      one interval, then repeats while the clock is before end_time
    - Each tick's deadline is its planned start plus the interval, so
      measurement time does not accumulate as drift
    - A tick that overruns the interval re-anchors the schedule on the
      current time instead of firing catch-up ticks
    - Sleeps never extend past end_time

    Ticks run strictly one after another on the calling thread.
    """

    def __init__(
        self,
        cycle: MeasurementCycle,
        duration_s: float,
        interval_s: float,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize schedule loop.

        Args:
            cycle: Measurement cycle run once per tick
            duration_s: Length of the run window in seconds
            interval_s: Nominal spacing between tick starts in seconds
            clock: Wall clock returning seconds
            sleep: Blocking sleep taking seconds
        """
        if duration_s <= 0:
            raise ValueError("duration_s must be positive")
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")

        self.cycle = cycle
        self.duration_s = duration_s
        self.interval_s = interval_s
        self.clock = clock
        self.sleep = sleep
        self.tick_starts: list[float] = []

    def run(self, start_time: float | None = None) -> RunSummary:
        """Run ticks until the window closes and return the counters."""
        if start_time is None:
            start_time = self.clock()
        window = RunWindow.starting_at(start_time, self.duration_s, self.interval_s)
        summary = RunSummary()
        self.tick_starts = []

        logger.info(
            "Run started: duration=%.0fs, interval=%.0fs, planned ticks=%d",
            window.duration,
            window.interval,
            window.planned_tick_count,
        )

        planned_start = window.start_time
        while True:
            actual_start = self.clock()
            self.tick_starts.append(actual_start)
            summary.ticks += 1
            logger.info("Tick %d/%d", summary.ticks, window.planned_tick_count)

            outcome = self.cycle.run()
            if outcome.record.is_failure:
                summary.failed += 1
            else:
                summary.succeeded += 1
            if not outcome.csv_written:
                summary.csv_write_failures += 1
            if not outcome.json_written:
                summary.json_write_failures += 1

            now = self.clock()
            if now >= window.end_time:
                break

            next_planned = planned_start + window.interval
            if next_planned < now:
                logger.warning(
                    "Tick overran interval by %.1fs, starting next tick immediately",
                    now - next_planned,
                )
                next_planned = now

            delay = min(next_planned, window.end_time) - now
            if delay > 0:
                self.sleep(delay)
            if self.clock() >= window.end_time:
                break
            planned_start = next_planned

        logger.info(
            "Run finished: ticks=%d, succeeded=%d, failed=%d, csv write failures=%d, "
            "json write failures=%d",
            summary.ticks,
            summary.succeeded,
            summary.failed,
            summary.csv_write_failures,
            summary.json_write_failures,
        )
        return summary
