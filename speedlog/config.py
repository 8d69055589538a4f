"""Run configuration and command-line options."""

import argparse
import platform
from dataclasses import dataclass, field
from pathlib import Path

from speedlog.collector_speedtest import DEFAULT_COMMAND

DEFAULT_DURATION_MIN = 60.0
DEFAULT_INTERVAL_MIN = 5.0
DEFAULT_LOG_PATH = Path("speedtest_log.csv")


def default_host() -> str:
    return platform.node() or "unknown"


@dataclass(frozen=True)
class RunConfig:
    """Immutable parameters for one run of the logger."""

    duration_s: float
    interval_s: float
    log_path: Path = DEFAULT_LOG_PATH
    auto_install: bool = False
    command: str = DEFAULT_COMMAND
    timeout_s: float | None = None
    host: str = field(default_factory=default_host)

    def __post_init__(self):
        if self.duration_s <= 0:
            raise ValueError("duration must be positive")
        if self.interval_s <= 0:
            raise ValueError("interval must be positive")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(self, "log_path", Path(self.log_path))

    @property
    def json_path(self) -> Path:
        """Document log path: the tabular log path with a .json extension."""
        return self.log_path.with_suffix(".json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="speedlog",
        description="Run the speed test CLI on a fixed interval and log results to CSV and JSON.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=DEFAULT_DURATION_MIN,
        help=f"Total run window in minutes (default: {DEFAULT_DURATION_MIN:g})",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL_MIN,
        help=f"Minutes between test starts (default: {DEFAULT_INTERVAL_MIN:g})",
    )
    parser.add_argument(
        "--log-path",
        type=Path,
        default=DEFAULT_LOG_PATH,
        help=f"CSV log path; the JSON log uses the same name with .json (default: {DEFAULT_LOG_PATH})",
    )
    parser.add_argument(
        "--auto-install",
        action="store_true",
        help="Install the speed test CLI with the platform package manager if it is missing",
    )
    parser.add_argument(
        "--command",
        default=DEFAULT_COMMAND,
        help=f"Speed test binary to run (default: {DEFAULT_COMMAND})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Kill a test that runs longer than this many seconds (default: no limit)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level name (default: $SPEEDLOG_LOG_LEVEL, else INFO)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    """Build a RunConfig from parsed arguments (minutes converted to seconds)."""
    return RunConfig(
        duration_s=args.duration * 60,
        interval_s=args.interval * 60,
        log_path=args.log_path,
        auto_install=args.auto_install,
        command=args.command,
        timeout_s=args.timeout,
    )
