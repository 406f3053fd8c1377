from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RawRecord:
    """One punch exactly as the access-control server reports it.

    Fields are the trimmed text between delimiters; log_time has its inner
    whitespace removed and is otherwise unparsed.
    """

    log_time: str
    worker_code: str
    device_name: str
    location: str
    direction: str


@dataclass(frozen=True)
class DeviceInfo:
    name: str
    serial_number: str
    location: str
