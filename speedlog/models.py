"""Data models for speedlog measurements."""

from dataclasses import dataclass
from datetime import datetime
from math import floor

ERROR_SENTINEL = "ERROR"

# Column order of the tabular log; also the key order of document log elements.
FIELD_NAMES = (
    "Timestamp",
    "ComputerName",
    "LatencyMs",
    "DownloadMbps",
    "UploadMbps",
    "PacketLoss",
    "ISP",
    "ServerName",
    "ServerLocation",
    "ResultUrl",
)


@dataclass
class MeasurementRecord:
    """Normalized outcome of one tick, successful or failed."""

    timestamp: datetime
    host_identifier: str
    latency_ms: float | None = None
    download_mbps: float | None = None
    upload_mbps: float | None = None
    packet_loss_percent: float | None = None
    isp: str | None = None
    server_name: str | None = None
    server_location: str | None = None
    result_url: str | None = None

    def __post_init__(self):
        """Timestamps are kept at second precision."""
        self.timestamp = self.timestamp.replace(microsecond=0)

    @classmethod
    def failed(cls, timestamp: datetime, host_identifier: str) -> "MeasurementRecord":
        """Build the record written when a tick produced no usable measurement."""
        return cls(timestamp=timestamp, host_identifier=host_identifier, isp=ERROR_SENTINEL)

    @property
    def is_failure(self) -> bool:
        return self.isp == ERROR_SENTINEL

    def values(self) -> tuple:
        """Field values in FIELD_NAMES order, timestamp rendered as ISO-8601."""
        return (
            self.timestamp.isoformat(timespec="seconds"),
            self.host_identifier,
            self.latency_ms,
            self.download_mbps,
            self.upload_mbps,
            self.packet_loss_percent,
            self.isp,
            self.server_name,
            self.server_location,
            self.result_url,
        )

    def to_dict(self) -> dict:
        return dict(zip(FIELD_NAMES, self.values()))


@dataclass(frozen=True)
class RunWindow:
    """Scheduling envelope for one run, in clock seconds."""

    start_time: float
    end_time: float
    interval: float

    @classmethod
    def starting_at(cls, start_time: float, duration: float, interval: float) -> "RunWindow":
        if duration <= 0:
            raise ValueError("duration must be positive")
        if interval <= 0:
            raise ValueError("interval must be positive")
        return cls(start_time=start_time, end_time=start_time + duration, interval=interval)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def planned_tick_count(self) -> int:
        """floor(duration / interval); used for progress only, never for termination."""
        return floor(self.duration / self.interval)
