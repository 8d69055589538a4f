"""Measurement source abstraction for speedlog."""

from typing import Protocol

from speedlog.fake_collector import FakeSpeedTest


class MeasurementSource(Protocol):
    """Protocol for anything that can run one speed test."""

    def invoke(self) -> str:
        """Run one measurement and return its raw JSON document."""
        ...


class FakeSourceAdapter:
    """Adapter that implements MeasurementSource using FakeSpeedTest."""

    def __init__(self, fake_speedtest: FakeSpeedTest | None = None):
        if fake_speedtest is None:
            fake_speedtest = FakeSpeedTest()
        self._fake_speedtest = fake_speedtest

    def invoke(self) -> str:
        return self._fake_speedtest.run()
