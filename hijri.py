"""
Approximate Gregorian -> Hijri conversion (tabular arithmetic calendar).
Not based on crescent sighting: dates may differ from the locally observed calendar by 1-2 days.
"""

import math
from dataclasses import dataclass
from datetime import date

from prayer_times import julian_date

HIJRI_MONTHS = (
    "Muharram",
    "Safar",
    "Rabi al-Awwal",
    "Rabi al-Thani",
    "Jumada al-Ula",
    "Jumada al-Thani",
    "Rajab",
    "Sha'ban",
    "Ramadan",
    "Shawwal",
    "Dhul Qi'dah",
    "Dhul Hijjah",
)


@dataclass(frozen=True)
class HijriDate:
    day: int
    month: int  # 1..12
    year: int

    @property
    def month_name(self) -> str:
        return HIJRI_MONTHS[self.month - 1]

    def __str__(self) -> str:
        return f"{self.day} {self.month_name} {self.year} AH"


def to_hijri(day: date) -> HijriDate:
    """Hijri day, month and year for a Gregorian date."""
    jd = julian_date(day.year, day.month, day.day)
    l = math.floor(jd - 1948439.5 + 10632)
    n = (l - 1) // 10631
    l = l - 10631 * n + 354
    j = ((10985 - l) // 5316) * ((50 * l) // 17719) + (l // 5670) * ((43 * l) // 15238)
    l = l - ((30 - j) // 15) * ((17719 * j) // 50) - (j // 16) * ((15238 * j) // 43) + 29
    m = (24 * l) // 709
    d = l - (709 * m) // 24
    y = 30 * n + j - 30
    return HijriDate(day=d, month=m, year=y)


def get_hijri_date(day: date) -> str:
    """e.g. '14 Ramadan 1446 AH'"""
    return str(to_hijri(day))
