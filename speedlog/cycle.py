"""One measurement cycle: invoke, parse, persist."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from speedlog.collector import MeasurementSource
from speedlog.csv_log import CsvAppender
from speedlog.errors import LogWriteFailed, MeasurementFailed
from speedlog.json_log import JsonLogStore
from speedlog.models import MeasurementRecord
from speedlog.parser import parse_result

logger = logging.getLogger(__name__)


@dataclass
class TickOutcome:
    """What happened during one tick."""

    record: MeasurementRecord
    csv_written: bool
    json_written: bool


class MeasurementCycle:
    """Runs a single tick and never lets a per-tick error escape.

    A record is always produced: failed measurements become failure records.
    The two log appends are attempted independently of each other.
    """

    def __init__(
        self,
        source: MeasurementSource,
        csv_log: CsvAppender,
        json_log: JsonLogStore,
        host: str,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.source = source
        self.csv_log = csv_log
        self.json_log = json_log
        self.host = host
        self.now = now

    def measure(self) -> MeasurementRecord:
        timestamp = self.now()
        try:
            raw = self.source.invoke()
            return parse_result(raw, timestamp, self.host)
        except MeasurementFailed as e:
            logger.warning("Measurement failed: %s", e)
        except Exception as e:
            logger.exception("Unexpected error from measurement source: %s", e)
        return MeasurementRecord.failed(timestamp, self.host)

    def run(self) -> TickOutcome:
        record = self.measure()

        csv_written = self._persist(self.csv_log, record)
        json_written = self._persist(self.json_log, record)

        logger.debug(
            "Tick complete: failure=%s, csv=%s, json=%s",
            record.is_failure,
            csv_written,
            json_written,
        )
        return TickOutcome(record=record, csv_written=csv_written, json_written=json_written)

    def _persist(self, store, record: MeasurementRecord) -> bool:
        try:
            store.append(record)
        except LogWriteFailed as e:
            logger.error("Log write failed: %s", e)
            return False
        return True
