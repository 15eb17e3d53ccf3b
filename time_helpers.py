"""
Helpers on top of computed prayer times: turning 'HH:MM' back into a datetime,
countdown text, the next upcoming prayer and 12h display.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from prayer_times import UNAVAILABLE, UNAVAILABLE_TEXT, Available, PrayerTimeSet, Unavailable

# Sunrise is not a prayer
PRAYER_NAMES = ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha")

COUNTDOWN_UNAVAILABLE = "--"


@dataclass(frozen=True)
class NextPrayer:
    name: str
    time: str  # 'HH:MM'
    at: datetime


def _parse_hhmm(value: Available | Unavailable | str | None) -> tuple[int, int] | None:
    if isinstance(value, Available):
        value = value.time
    if not isinstance(value, str) or not value or value == UNAVAILABLE_TEXT:
        return None
    hour, minute = value.split(":")
    return int(hour), int(minute)


def parse_to_instant(
    value: Available | Unavailable | str | None,
    reference: date | datetime,
) -> datetime | Unavailable:
    """
    Datetime on the reference date at the given wall-clock time.
    value: an Available entry or an 'HH:MM' string.
    reference: a date, or a datetime whose tzinfo is kept.
    Returns UNAVAILABLE when the time itself is unavailable.
    """
    parsed = _parse_hhmm(value)
    if parsed is None:
        return UNAVAILABLE
    hour, minute = parsed
    if isinstance(reference, datetime):
        return reference.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return datetime.combine(reference, time(hour, minute))


def get_countdown(target: datetime | Unavailable | None, now: datetime) -> str:
    """'2h 14m remaining' / '37m remaining'. A target earlier than now counts as the same time tomorrow."""
    if not isinstance(target, datetime):
        return COUNTDOWN_UNAVAILABLE
    diff = target - now
    if diff < timedelta(0):
        diff += timedelta(hours=24)
    total_minutes = int(diff.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m remaining"
    return f"{minutes}m remaining"


def next_prayer(times: PrayerTimeSet, now: datetime) -> NextPrayer | None:
    """
    First prayer still ahead of `now` on today's date; after Isha it is tomorrow's Fajr.
    Unavailable prayers are skipped. None when no prayer time is available at all.
    """
    for name in PRAYER_NAMES:
        at = parse_to_instant(times[name], now)
        if isinstance(at, datetime) and at > now:
            return NextPrayer(name=name, time=times[name].time, at=at)

    fajr = parse_to_instant(times["Fajr"], now)
    if isinstance(fajr, datetime):
        return NextPrayer(name="Fajr", time=times["Fajr"].time, at=fajr + timedelta(days=1))
    return None


def format_time_12h(value: Available | Unavailable | str | None) -> str:
    """'13:05' -> '1:05 PM'"""
    parsed = _parse_hhmm(value)
    if parsed is None:
        return UNAVAILABLE_TEXT
    hour, minute = parsed
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {period}"
