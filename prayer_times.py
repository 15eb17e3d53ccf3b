"""
Prayer times calculation using astronomical formulas (USNO approximate solar coordinates).
Supports ISNA, MWL, Egypt, Makkah and Karachi conventions; Asr: Shafi (shadow = 1 × object + noon shadow).
"""

import logging
import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime, time
from types import MappingProxyType
from typing import Mapping, NamedTuple, TypedDict

logger = logging.getLogger(__name__)

UNAVAILABLE_TEXT = "--:--"

# Sunrise/sunset use 0.833° (refraction + solar disk radius), whatever the method
SUNRISE_SUNSET_ANGLE = 0.833
ASR_SHADOW_FACTOR = 1


@dataclass(frozen=True)
class CalculationMethod:
    name: str
    fajr_angle: float
    isha_angle: float
    isha_offset_minutes: float = 0


METHODS: Mapping[str, CalculationMethod] = MappingProxyType(
    {
        "ISNA": CalculationMethod("ISNA", fajr_angle=15, isha_angle=15),
        "MWL": CalculationMethod("MWL", fajr_angle=18, isha_angle=17),
        "Egypt": CalculationMethod("Egypt", fajr_angle=19.5, isha_angle=17.5),
        "Makkah": CalculationMethod("Makkah", fajr_angle=18.5, isha_angle=0, isha_offset_minutes=90),
        "Karachi": CalculationMethod("Karachi", fajr_angle=18, isha_angle=18),
    }
)
DEFAULT_METHOD = "ISNA"


def get_method(name: str | None) -> CalculationMethod:
    """Look up a calculation method, falling back to ISNA for unknown names."""
    method = METHODS.get(name) if name is not None else None
    if method is None:
        logger.debug("Unknown calculation method %r, using %s", name, DEFAULT_METHOD)
        return METHODS[DEFAULT_METHOD]
    return method


class Unavailable:
    """Marker for a time the sun never reaches on that day (polar day/night)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def time(self) -> str:
        return UNAVAILABLE_TEXT

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = Unavailable()


@dataclass(frozen=True)
class Available:
    hours: float  # local time as decimal hours in [0, 24)
    time: str  # 'HH:MM'


PrayerEntry = Available | Unavailable


TIME_NAMES = ("Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha")


class PrayerTimeSet(TypedDict):
    Fajr: PrayerEntry
    Sunrise: PrayerEntry
    Dhuhr: PrayerEntry
    Asr: PrayerEntry
    Maghrib: PrayerEntry
    Isha: PrayerEntry


class SolarPosition(NamedTuple):
    declination: float  # degrees
    equation_of_time: float  # hours


def _deg2rad(d: float) -> float:
    return d * math.pi / 180.0


def _rad2deg(r: float) -> float:
    return r * 180.0 / math.pi


def _normalize_angle_360(degrees: float) -> float:
    """Normalize angle to [0, 360)."""
    d = degrees % 360.0
    return d if d >= 0 else d + 360.0


def _normalize_hour_24(hours: float) -> float:
    """Normalize hour to [0, 24)."""
    h = hours % 24.0
    return h if h >= 0 else h + 24.0


def _is_finite(*values: object) -> bool:
    return all(isinstance(v, numbers.Real) and math.isfinite(v) for v in values)


def _real(value: object) -> float:
    """Coordinates and offsets that are not finite numbers become NaN (and end up unavailable)."""
    return float(value) if _is_finite(value) else math.nan


def format_time(hours: float | None) -> str:
    """Convert decimal hours (any real) to 'HH:MM' 24h format, or '--:--' when there is no time."""
    if not _is_finite(hours):
        return UNAVAILABLE_TEXT
    h = _normalize_hour_24(hours)
    hour = int(math.floor(h))
    minute = int(math.floor((h - hour) * 60 + 0.5))  # half up
    if minute >= 60:
        minute = 0
        hour += 1
    if hour >= 24:
        hour = 0
    return f"{hour:02d}:{minute:02d}"


def _entry(hours: float | None) -> PrayerEntry:
    if not _is_finite(hours):
        return UNAVAILABLE
    return Available(hours=_normalize_hour_24(hours), time=format_time(hours))


def julian_date(year: int, month: int, day: int) -> float:
    """Julian date at 0h UTC of the given Gregorian date."""
    if month <= 2:
        year -= 1
        month += 12
    A = math.floor(year / 100)
    B = 2 - A + math.floor(A / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + B - 1524.5


def sun_position(jd: float) -> SolarPosition:
    """
    USNO approximate solar coordinates. Returns declination in degrees and equation of time in hours.
    """
    if not _is_finite(jd):
        return SolarPosition(declination=math.nan, equation_of_time=math.nan)
    D = jd - 2451545.0
    g = _normalize_angle_360(357.529 + 0.98560028 * D)
    q = _normalize_angle_360(280.459 + 0.98564736 * D)
    L = _normalize_angle_360(q + 1.915 * math.sin(_deg2rad(g)) + 0.020 * math.sin(_deg2rad(2 * g)))
    e = 23.439 - 0.00000036 * D

    # Right ascension (same quadrant as L)
    sin_L = math.sin(_deg2rad(L))
    cos_L = math.cos(_deg2rad(L))
    RA_rad = math.atan2(math.cos(_deg2rad(e)) * sin_L, cos_L)
    RA_hours = _normalize_hour_24(_rad2deg(RA_rad) / 15.0)

    # Equation of time: apparent solar time minus mean solar time (hours)
    EqT = q / 15.0 - RA_hours

    decl = _rad2deg(math.asin(math.sin(_deg2rad(e)) * sin_L))
    return SolarPosition(declination=decl, equation_of_time=EqT)


def _hour_angle(angle_below_deg: float, lat_deg: float, decl_deg: float) -> float | None:
    """
    Time from solar noon (hours) until the sun is at the given angle below horizon.
    angle_below_deg: positive = below horizon (e.g. 18 for Fajr, 0.833 for sunrise).
    Returns None if the sun never reaches that angle (polar day/night).
    """
    if not _is_finite(angle_below_deg, lat_deg, decl_deg):
        return None
    lat_r = _deg2rad(lat_deg)
    decl_r = _deg2rad(decl_deg)
    denominator = math.cos(lat_r) * math.cos(decl_r)
    if denominator == 0:
        return None
    cos_omega = (-math.sin(_deg2rad(angle_below_deg)) - math.sin(lat_r) * math.sin(decl_r)) / denominator
    if not -1 <= cos_omega <= 1:
        logger.debug(
            "Sun does not reach %.3f° below horizon at lat=%.4f decl=%.4f",
            angle_below_deg,
            lat_deg,
            decl_deg,
        )
        return None
    return _rad2deg(math.acos(cos_omega)) / 15.0


def _asr_hour_angle(lat_deg: float, decl_deg: float, factor: float = ASR_SHADOW_FACTOR) -> float | None:
    """Time from solar noon (hours) until Asr (shadow = factor × height + noon shadow)."""
    if not _is_finite(lat_deg, decl_deg):
        return None
    phi_minus_d = abs(lat_deg - decl_deg)
    if phi_minus_d >= 90:
        return None
    # tan(sun_altitude) = 1 / (factor + tan(|lat - decl|))
    altitude = _rad2deg(math.atan(1.0 / (factor + math.tan(_deg2rad(phi_minus_d)))))
    return _hour_angle(-altitude, lat_deg, decl_deg)


def local_utc_offset_hours(day: date) -> float:
    """UTC offset of the machine's local timezone at noon of the given date, in hours."""
    offset = datetime.combine(day, time(12)).astimezone().utcoffset()
    return offset.total_seconds() / 3600.0


def compute_prayer_times(
    day: date,
    latitude: float,
    longitude: float,
    method_name: str = DEFAULT_METHOD,
    timezone_offset_hours: float | None = None,
) -> PrayerTimeSet:
    """
    Compute Fajr, Sunrise, Dhuhr, Asr, Maghrib and Isha for one day.

    day: local calendar date
    latitude/longitude: decimal degrees, east and north positive
    method_name: key of METHODS; unknown names use ISNA
    timezone_offset_hours: hours east of UTC (e.g. 3 for Makkah); None uses the local offset for `day`
    Every entry is Available(hours, 'HH:MM') or UNAVAILABLE when the sun never reaches the angle.
    """
    method = get_method(method_name)
    if timezone_offset_hours is None:
        timezone_offset_hours = local_utc_offset_hours(day)
    latitude, longitude, timezone_offset_hours = _real(latitude), _real(longitude), _real(timezone_offset_hours)

    jd = julian_date(day.year, day.month, day.day) - longitude / (15.0 * 24.0)
    sun = sun_position(jd + 1)
    decl = sun.declination

    mid_day = _normalize_hour_24(12.0 - sun.equation_of_time)
    dhuhr = mid_day + timezone_offset_hours - longitude / 15.0

    def before_noon(offset: float | None) -> float | None:
        return None if offset is None else dhuhr - offset

    def after_noon(offset: float | None) -> float | None:
        return None if offset is None else dhuhr + offset

    sunrise = before_noon(_hour_angle(SUNRISE_SUNSET_ANGLE, latitude, decl))
    sunset = after_noon(_hour_angle(SUNRISE_SUNSET_ANGLE, latitude, decl))
    fajr = before_noon(_hour_angle(method.fajr_angle, latitude, decl))
    asr = after_noon(_asr_hour_angle(latitude, decl))

    if method.isha_offset_minutes > 0:
        isha = None if sunset is None else sunset + method.isha_offset_minutes / 60.0
    else:
        isha = after_noon(_hour_angle(method.isha_angle, latitude, decl))

    return PrayerTimeSet(
        Fajr=_entry(fajr),
        Sunrise=_entry(sunrise),
        Dhuhr=_entry(dhuhr),
        Asr=_entry(asr),
        Maghrib=_entry(sunset),
        Isha=_entry(isha),
    )


def times_as_text(times: PrayerTimeSet) -> list[str]:
    """[Fajr, Sunrise, Dhuhr, Asr, Maghrib, Isha] as 'HH:MM' strings, '--:--' when unavailable."""
    return [times[name].time for name in TIME_NAMES]
