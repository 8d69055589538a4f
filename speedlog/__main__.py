"""Entry point for speedlog."""

import logging
import os
import sys

from speedlog.collector import FakeSourceAdapter, MeasurementSource
from speedlog.collector_speedtest import SpeedTestCollector
from speedlog.config import RunConfig, build_parser, config_from_args
from speedlog.csv_log import CsvAppender
from speedlog.cycle import MeasurementCycle
from speedlog.errors import ToolNotFound
from speedlog.installer import ensure_tool
from speedlog.json_log import JsonLogStore
from speedlog.logging_config import configure_logging
from speedlog.scheduler import RunSummary, ScheduleLoop

logger = logging.getLogger(__name__)


def select_source(config: RunConfig) -> MeasurementSource:
    """Pick the measurement source for this run.

    SPEEDLOG_COLLECTOR=fake selects simulated results and skips tool discovery.

    Raises:
        ToolNotFound: the speed test binary is missing and could not be installed
    """
    if os.environ.get("SPEEDLOG_COLLECTOR", "").lower() == "fake":
        logger.info("Using FakeSourceAdapter (SPEEDLOG_COLLECTOR=fake)")
        return FakeSourceAdapter()

    path = ensure_tool(config.command, auto_install=config.auto_install)
    return SpeedTestCollector(command=path, timeout_s=config.timeout_s)


def run(config: RunConfig, source: MeasurementSource) -> RunSummary:
    cycle = MeasurementCycle(
        source=source,
        csv_log=CsvAppender(config.log_path),
        json_log=JsonLogStore(config.json_path),
        host=config.host,
    )
    loop = ScheduleLoop(cycle, duration_s=config.duration_s, interval_s=config.interval_s)
    logger.info("Logging to %s and %s", config.log_path, config.json_path)
    return loop.run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        source = select_source(config)
    except ToolNotFound as e:
        logger.error("%s", e)
        return 1

    try:
        run(config, source)
    except KeyboardInterrupt:
        logger.warning("Interrupted, stopping before the run window closed")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
