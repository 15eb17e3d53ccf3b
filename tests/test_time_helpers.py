# tests/test_time_helpers.py

from datetime import date, datetime, timedelta, timezone

import pytest

from prayer_times import UNAVAILABLE, Available, PrayerTimeSet, compute_prayer_times
from time_helpers import (
    PRAYER_NAMES,
    format_time_12h,
    get_countdown,
    next_prayer,
    parse_to_instant,
)


def _at(text):
    hour, minute = text.split(":")
    return Available(hours=int(hour) + int(minute) / 60, time=text)


@pytest.fixture
def times():
    return PrayerTimeSet(
        Fajr=_at("05:28"),
        Sunrise=_at("06:29"),
        Dhuhr=_at("12:30"),
        Asr=_at("15:54"),
        Maghrib=_at("18:30"),
        Isha=_at("19:31"),
    )


def test_prayer_names_exclude_sunrise():
    assert PRAYER_NAMES == ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha")


def test_parse_to_instant_on_date():
    assert parse_to_instant("05:07", date(2025, 3, 14)) == datetime(2025, 3, 14, 5, 7)
    assert parse_to_instant(_at("19:31"), date(2025, 3, 14)) == datetime(2025, 3, 14, 19, 31)


def test_parse_to_instant_keeps_timezone():
    tz = timezone(timedelta(hours=3))
    reference = datetime(2025, 3, 14, 22, 45, 12, 500, tzinfo=tz)
    assert parse_to_instant("12:30", reference) == datetime(2025, 3, 14, 12, 30, tzinfo=tz)


@pytest.mark.parametrize("value", [UNAVAILABLE, "--:--", "", None])
def test_parse_to_instant_unavailable(value):
    assert parse_to_instant(value, date(2025, 3, 14)) is UNAVAILABLE


def test_countdown_hours_and_minutes():
    now = datetime(2025, 3, 14, 11, 46)
    assert get_countdown(datetime(2025, 3, 14, 14, 0), now) == "2h 14m remaining"


def test_countdown_minutes_only():
    now = datetime(2025, 3, 14, 12, 0)
    assert get_countdown(datetime(2025, 3, 14, 12, 37), now) == "37m remaining"


def test_countdown_floors_partial_minutes():
    now = datetime(2025, 3, 14, 11, 46, 30)
    assert get_countdown(datetime(2025, 3, 14, 14, 0), now) == "2h 13m remaining"


def test_countdown_wraps_to_tomorrow():
    now = datetime(2025, 3, 14, 20, 0)
    assert get_countdown(datetime(2025, 3, 14, 5, 28), now) == "9h 28m remaining"


def test_countdown_unavailable():
    assert get_countdown(UNAVAILABLE, datetime(2025, 3, 14, 20, 0)) == "--"


def test_next_prayer_during_the_day(times):
    upcoming = next_prayer(times, datetime(2025, 3, 14, 13, 0))
    assert upcoming.name == "Asr"
    assert upcoming.time == "15:54"
    assert upcoming.at == datetime(2025, 3, 14, 15, 54)


def test_next_prayer_skips_sunrise(times):
    assert next_prayer(times, datetime(2025, 3, 14, 6, 0)).name == "Dhuhr"


def test_next_prayer_after_isha_is_tomorrows_fajr(times):
    upcoming = next_prayer(times, datetime(2025, 3, 14, 21, 0))
    assert upcoming.name == "Fajr"
    assert upcoming.at == datetime(2025, 3, 15, 5, 28)


def test_next_prayer_skips_unavailable(times):
    times["Isha"] = UNAVAILABLE
    upcoming = next_prayer(times, datetime(2025, 3, 14, 19, 0))
    assert upcoming.name == "Fajr"
    assert upcoming.at == datetime(2025, 3, 15, 5, 28)


def test_next_prayer_none_available():
    polar = compute_prayer_times(date(2025, 6, 21), 80.0, 15.0, "MWL", 2.0)
    polar["Dhuhr"] = UNAVAILABLE
    polar["Asr"] = UNAVAILABLE
    assert next_prayer(polar, datetime(2025, 6, 21, 12, 0)) is None


def test_next_prayer_from_computed_times():
    now = datetime(2025, 3, 14, 12, 0, tzinfo=timezone(timedelta(hours=3)))
    computed = compute_prayer_times(now.date(), 21.4225, 39.8262, "ISNA", 3.0)
    upcoming = next_prayer(computed, now)
    assert upcoming.name == "Dhuhr"
    assert get_countdown(upcoming.at, now).endswith("m remaining")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("00:05", "12:05 AM"),
        ("05:28", "5:28 AM"),
        ("12:30", "12:30 PM"),
        ("19:31", "7:31 PM"),
        ("--:--", "--:--"),
        (UNAVAILABLE, "--:--"),
    ],
)
def test_format_time_12h(value, expected):
    assert format_time_12h(value) == expected
