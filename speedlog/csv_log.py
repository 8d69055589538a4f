"""Append-only tabular log of measurement records."""

import csv
import io
import logging
from pathlib import Path

from speedlog.errors import LogWriteFailed
from speedlog.models import FIELD_NAMES, MeasurementRecord

logger = logging.getLogger(__name__)


class CsvAppender:
    """Appends one fully quoted row per record to a CSV file.

    The header row is written when the file is missing or empty, never again.
    Each append is a single write; prior content is never read back.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _format(self, record: MeasurementRecord, with_header: bool) -> str:
        buffer = io.StringIO()
        if with_header:
            buffer.write(",".join(FIELD_NAMES) + "\n")
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(["" if value is None else value for value in record.values()])
        return buffer.getvalue()

    def append(self, record: MeasurementRecord) -> None:
        """Append ``record`` as one row.

        Raises:
            LogWriteFailed: the file or its directory could not be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            new_file = not self.path.exists() or self.path.stat().st_size == 0
            payload = self._format(record, with_header=new_file)
            with self.path.open("a", encoding="utf-8", newline="") as f:
                f.write(payload)
        except (OSError, UnicodeError) as e:
            raise LogWriteFailed(f"cannot append to {self.path}: {e}") from e

        if new_file:
            logger.info("Created tabular log: %s", self.path)
