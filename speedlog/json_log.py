"""JSON-array document log of measurement records.

Every append reads the whole array, adds one element, and rewrites the
file, so cost grows linearly with the number of stored records. That is
fine for a few hundred records per run. The rewrite goes through a
temporary file and a rename, so a crash leaves either the old or the new
array. Two processes appending to the same file can still lose updates.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from speedlog.errors import CorruptLog, LogWriteFailed
from speedlog.models import MeasurementRecord

logger = logging.getLogger(__name__)


class JsonLogStore:
    """Single JSON array file, rewritten in full on each append."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _ensure_exists(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write([])
            logger.info("Created document log: %s", self.path)

    def load(self) -> list:
        """Read and return the stored array.

        A whitespace-only file counts as an empty array.

        Raises:
            CorruptLog: content is not UTF-8 or not a JSON array
            LogWriteFailed: the file could not be read
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptLog(self.path, f"not UTF-8 text: {e}") from e
        except OSError as e:
            raise LogWriteFailed(f"cannot read {self.path}: {e}") from e

        if not text.strip():
            return []

        try:
            entries = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptLog(self.path, f"invalid JSON: {e}") from e

        if not isinstance(entries, list):
            raise CorruptLog(self.path, f"expected a JSON array, found {type(entries).__name__}")
        return entries

    def _write(self, entries: list) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def append(self, record: MeasurementRecord) -> None:
        """Append ``record`` after all existing elements.

        Raises:
            CorruptLog: existing content is not a JSON array (file untouched)
            LogWriteFailed: the file could not be read or written
        """
        try:
            self._ensure_exists()
            entries = self.load()
            entries.append(record.to_dict())
            self._write(entries)
        except (OSError, UnicodeEncodeError) as e:
            raise LogWriteFailed(f"cannot write {self.path}: {e}") from e

        logger.debug("Document log now holds %d records", len(entries))
