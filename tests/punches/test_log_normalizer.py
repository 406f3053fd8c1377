from __future__ import annotations

from datetime import datetime

import pytest

from src.canteen_attendance.canteen_attendance.common.datetime_utils import reference_zone
from src.canteen_attendance.canteen_attendance.core.enums import PunchDirection
from src.canteen_attendance.canteen_attendance.device.model import RawRecord
from src.canteen_attendance.canteen_attendance.punches.normalizer import LogNormalizer, parse_direction, parse_log_time

IST = reference_zone("Asia/Kolkata")


def test_glued_timestamp_is_parsed_in_reference_zone():
    parsed = parse_log_time("2025-03-2311:34:52", IST)

    assert parsed == datetime(2025, 3, 23, 11, 34, 52, tzinfo=IST)
    assert parsed.utcoffset().total_seconds() == 5.5 * 3600


@pytest.mark.parametrize("raw", ["2025-03-23 11:34:52", "2025-03-23T11:34:52"])
def test_separated_timestamps_are_also_accepted(raw):
    assert parse_log_time(raw, IST) == datetime(2025, 3, 23, 11, 34, 52, tzinfo=IST)


def test_missing_seconds_default_to_zero():
    assert parse_log_time("2025-03-2311:34", IST) == datetime(2025, 3, 23, 11, 34, 0, tzinfo=IST)


@pytest.mark.parametrize("raw", ["", "garbage", "2025-13-4011:00:00", "2025-03-2325:61:00", None])
def test_unusable_timestamps_are_none(raw):
    assert parse_log_time(raw, IST) is None


def test_direction_mapping():
    assert parse_direction("IN") == PunchDirection.IN
    assert parse_direction("check-out") == PunchDirection.OUT
    assert parse_direction("") == PunchDirection.UNKNOWN


def test_normalize_builds_event():
    rec = RawRecord(log_time="2025-03-2311:34:52", worker_code=" E1001 ", device_name="Chennai Canteen", location="Chennai", direction="in")

    event = LogNormalizer(IST).normalize(rec)

    assert event is not None
    assert event.worker_code == "E1001"
    assert event.raw_timestamp == "2025-03-2311:34:52"
    assert event.normalized_time == datetime(2025, 3, 23, 11, 34, 52, tzinfo=IST)
    assert event.location_label == "Chennai"
    assert event.direction == PunchDirection.IN


def test_normalize_drops_records_without_code_or_time():
    normalizer = LogNormalizer(IST)

    assert normalizer.normalize(RawRecord("2025-03-2311:34:52", "", "D", "Chennai", "")) is None
    assert normalizer.normalize(RawRecord("not-a-time", "E1001", "D", "Chennai", "")) is None
