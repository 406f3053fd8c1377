from __future__ import annotations

import logging
import re
from datetime import datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import reference_zone
from ..core.enums import PunchDirection
from ..device.model import RawRecord
from .model import PunchEvent

logger = logging.getLogger(__name__)

# The server glues the date and the clock time together: 2025-03-2311:34:52
_GLUED_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]?(\d{2}:\d{2}(?::\d{2})?)$")

_DIRECTIONS = {
    "in": PunchDirection.IN,
    "checkin": PunchDirection.IN,
    "0": PunchDirection.IN,
    "out": PunchDirection.OUT,
    "checkout": PunchDirection.OUT,
    "1": PunchDirection.OUT,
}


def parse_log_time(raw: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse a device timestamp into an aware datetime, or None if unusable."""
    if not isinstance(raw, str):
        return None

    match = _GLUED_RE.match(raw.strip())
    if not match:
        return None

    day_part, clock_part = match.groups()
    if clock_part.count(":") == 1:
        clock_part += ":00"

    try:
        parsed = datetime.strptime(f"{day_part} {clock_part}", "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None
    return parsed.replace(tzinfo=tz or reference_zone())


def parse_direction(raw: str) -> PunchDirection:
    key = (raw or "").strip().lower().replace("-", "").replace(" ", "")
    return _DIRECTIONS.get(key, PunchDirection.UNKNOWN)


class LogNormalizer:
    """RawRecord -> PunchEvent. Bad records yield None; they never raise."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz or reference_zone()

    def normalize(self, record: RawRecord) -> Optional[PunchEvent]:
        worker_code = (record.worker_code or "").strip()
        if not worker_code:
            logger.info("Dropping record without worker code: %r", record)
            return None

        normalized = parse_log_time(record.log_time, self._tz)
        if normalized is None:
            logger.warning("Invalid log time for worker %s: %r", worker_code, record.log_time)
            return None

        return PunchEvent(
            raw_timestamp=record.log_time,
            normalized_time=normalized,
            worker_code=worker_code,
            device_name=(record.device_name or "").strip(),
            location_label=(record.location or "").strip(),
            direction=parse_direction(record.direction),
        )
