"""Exception hierarchy for speedlog."""

from pathlib import Path


class SpeedLogError(Exception):
    """Base class for all speedlog errors."""


class ToolNotFound(SpeedLogError):
    """The external measurement binary cannot be located."""


class MeasurementFailed(SpeedLogError):
    """A single invocation produced no usable output."""


class ParseFailed(MeasurementFailed):
    """Output was present but is not a JSON measurement document."""


class LogWriteFailed(SpeedLogError):
    """A log file could not be written."""


class CorruptLog(LogWriteFailed):
    """The document log does not hold a JSON array; it is left untouched."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
