from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import PunchDirection


@dataclass(frozen=True)
class PunchEvent:
    """A normalized punch; lives only for one reconciliation pass."""

    raw_timestamp: str
    normalized_time: datetime
    worker_code: str
    device_name: str
    location_label: str
    direction: PunchDirection = PunchDirection.UNKNOWN
