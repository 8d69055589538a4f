"""Parsing of speed-test JSON documents into measurement records."""

import json
import logging
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from speedlog.errors import MeasurementFailed, ParseFailed
from speedlog.models import MeasurementRecord

logger = logging.getLogger(__name__)

BITS_PER_BYTE = 8
BITS_PER_MEGABIT = 1_000_000


def _is_number(value) -> bool:
    """True for finite ints and floats; bools, NaN and infinities are not numbers here."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _text(value):
    # json.loads accepts lone surrogates, which cannot be written as UTF-8.
    if isinstance(value, str):
        return value.encode("utf-8", "replace").decode("utf-8")
    return value


def round_half_up(value: float, places: int = 1) -> float:
    """Round to ``places`` decimals, halves away from zero.

    Goes through the shortest decimal repr of ``value`` so that e.g. 0.25
    rounds to 0.3 rather than following the binary float representation.

    Examples:
        >>> round_half_up(23.456)
        23.5
        >>> round_half_up(-0.25)
        -0.3
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def bandwidth_to_mbps(bandwidth) -> float | None:
    """Convert a bytes/second bandwidth to decimal megabits/second.

    Falsy values (missing, null, zero) map to None: a reported zero
    bandwidth is indistinguishable from an absent one.
    """
    if not bandwidth or not _is_number(bandwidth):
        return None
    return round_half_up(bandwidth * BITS_PER_BYTE / BITS_PER_MEGABIT)


def _section(document: dict, key: str) -> dict:
    value = document.get(key)
    return value if isinstance(value, dict) else {}


def parse_result(raw: str, timestamp: datetime, host: str) -> MeasurementRecord:
    """Build a MeasurementRecord from one raw JSON document.

    Missing optional fields become None. Only empty output and output
    that is not a JSON object are fatal for the tick.

    Args:
        raw: Standard output of one speed-test invocation
        timestamp: Capture time of the tick
        host: Machine name to stamp on the record

    Returns:
        A successful MeasurementRecord (possibly with null fields)

    Raises:
        MeasurementFailed: raw is empty or whitespace-only
        ParseFailed: raw is not a JSON object
    """
    if raw is None or not raw.strip():
        raise MeasurementFailed("speed test produced no output")

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseFailed(f"invalid JSON output: {e}") from e

    if not isinstance(document, dict):
        raise ParseFailed(f"expected a JSON object, got {type(document).__name__}")

    latency = _section(document, "ping").get("latency")
    if _is_number(latency):
        latency = round_half_up(latency)
    else:
        latency = None

    packet_loss = document.get("packetLoss")
    server = _section(document, "server")
    record = MeasurementRecord(
        timestamp=timestamp,
        host_identifier=host,
        latency_ms=latency,
        download_mbps=bandwidth_to_mbps(_section(document, "download").get("bandwidth")),
        upload_mbps=bandwidth_to_mbps(_section(document, "upload").get("bandwidth")),
        packet_loss_percent=packet_loss if _is_number(packet_loss) else None,
        isp=_text(document.get("isp")),
        server_name=_text(server.get("name")),
        server_location=_text(server.get("location")),
        result_url=_text(_section(document, "result").get("url")),
    )
    logger.debug(
        "Parsed result: latency=%s, download=%s, upload=%s",
        record.latency_ms,
        record.download_mbps,
        record.upload_mbps,
    )
    return record
