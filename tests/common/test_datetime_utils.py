from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from timesheet_tracker.common.datetime_utils import (
    current_time_of_day,
    default_report_range,
    duration_minutes,
    epoch_ms,
    format_date_label,
    format_date_short,
    hours_string_to_minutes,
    iso_date,
    minutes_to_hours_string,
    parse_time_of_day,
    time_of_day_from_epoch_ms,
    to_12_hour,
)


def test_duration_plain_and_with_lunch():
    assert duration_minutes("08:00", "17:00", False) == 540
    assert duration_minutes("08:00", "17:00", True) == 510


def test_duration_never_negative():
    assert duration_minutes("09:00", "09:10", True) == 0
    assert duration_minutes("17:00", "08:00", False) == 0


def test_duration_unparseable_is_zero():
    assert duration_minutes("", "17:00", False) == 0
    assert duration_minutes("8am", "17:00", False) == 0


def test_duration_accepts_seconds():
    assert duration_minutes("08:00:30", "08:01:00", False) == 0.5


def test_parse_time_of_day_rejects_out_of_range():
    assert parse_time_of_day("24:00") is None
    assert parse_time_of_day("12:60") is None
    assert parse_time_of_day("7:30") is None
    assert parse_time_of_day("23:59") is not None


def test_minutes_to_hours_string():
    assert minutes_to_hours_string(0) == "0:00"
    assert minutes_to_hours_string(480) == "8:00"
    assert minutes_to_hours_string(90.9) == "1:30"
    assert minutes_to_hours_string(-45) == "-0:45"


def test_hours_string_to_minutes():
    assert hours_string_to_minutes("8:00") == 480
    assert hours_string_to_minutes("12:05") == 725
    with pytest.raises(ValueError):
        hours_string_to_minutes("8:75")
    with pytest.raises(ValueError):
        hours_string_to_minutes("eight")


def test_to_12_hour():
    assert to_12_hour("00:15") == "12:15 AM"
    assert to_12_hour("09:05") == "9:05 AM"
    assert to_12_hour("12:00") == "12:00 PM"
    assert to_12_hour("17:30") == "5:30 PM"
    assert to_12_hour("") == ""


def test_today_uses_operating_timezone():
    # 03:30 UTC is still the previous evening in Toronto.
    utc = datetime(2026, 2, 2, 3, 30, tzinfo=timezone.utc)
    assert iso_date(utc) == "2026-02-01"
    assert current_time_of_day(utc) == "22:30"


def test_epoch_round_trip_to_local_time(fixed_now):
    assert time_of_day_from_epoch_ms(epoch_ms(fixed_now)) == "09:00"


def test_date_formatting():
    assert format_date_short("2024-01-05") == "Jan 05"
    assert format_date_label("2024-01-05") == "Jan 5, 2024"
    assert format_date_label("not a date") == "not a date"


def test_default_report_range():
    start, end = default_report_range(date(2026, 2, 15), days=14)
    assert start == date(2026, 2, 1)
    assert end == date(2026, 2, 15)


@pytest.mark.parametrize("text", ["0:00", "0:05", "1:30", "8:00", "12:59", "100:00"])
def test_hours_string_round_trip(text):
    assert minutes_to_hours_string(hours_string_to_minutes(text)) == text


@pytest.mark.parametrize("minutes", [0, 1, 59, 60, 61, 480, 1439, 6000])
def test_minutes_round_trip(minutes):
    assert hours_string_to_minutes(minutes_to_hours_string(minutes)) == minutes
