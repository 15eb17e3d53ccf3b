import logging
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query

from config import Settings, load_settings
from hijri import to_hijri
from prayer_times import METHODS, compute_prayer_times, get_method, times_as_text
from time_helpers import format_time_12h, get_countdown, next_prayer

load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level)


configure_logging(load_settings())

app = FastAPI(
    title="Prayer Times API",
    description="API service for calculating Islamic prayer times",
    version="1.0.0"
)


@lru_cache
def get_settings() -> Settings:
    return load_settings()


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD")


@app.get("/")
def root():
    return {
        "service": "Prayer Times API",
        "status": "online",
        "endpoints": {
            "/api/timesForGPS": "Get prayer times for GPS coordinates",
            "/api/nextPrayer": "Get the next prayer and a countdown to it",
            "/api/hijri": "Get the approximate Hijri date",
            "/api/methods": "List calculation methods"
        }
    }


@app.get("/api/methods")
def get_methods():
    return {
        "methods": [
            {
                "name": method.name,
                "fajrAngle": method.fajr_angle,
                "ishaAngle": method.isha_angle,
                "ishaMinutes": method.isha_offset_minutes,
            }
            for method in METHODS.values()
        ]
    }


@app.get("/api/timesForGPS")
def get_times_for_gps(
    date: str,
    lat: float | None = None,
    lng: float | None = None,
    days: int = Query(1, ge=1, le=31),
    timezoneOffset: int | None = None, # Minutes east of UTC, e.g. 180; omitted = server's local offset
    calculationMethod: str | None = None,
    settings: Settings = Depends(get_settings),
):
    start_date = _parse_date(date)
    lat = settings.latitude if lat is None else lat
    lng = settings.longitude if lng is None else lng
    method = get_method(calculationMethod or settings.method)
    # Convert minutes to hours (e.g., 180 -> 3.0)
    offset_hours = None if timezoneOffset is None else timezoneOffset / 60.0

    response_times = {}

    for i in range(days):
        current_day = start_date + timedelta(days=i)
        times = compute_prayer_times(current_day, lat, lng, method.name, offset_hours)
        # [0]: Fajr, [1]: Sunrise, [2]: Dhuhr, [3]: Asr, [4]: Maghrib, [5]: Isha
        response_times[current_day.isoformat()] = times_as_text(times)

    logger.info("Computed %d day(s) from %s for lat=%s lng=%s (%s)", days, start_date, lat, lng, method.name)
    return {"method": method.name, "times": response_times}


@app.get("/api/nextPrayer")
def get_next_prayer(
    lat: float | None = None,
    lng: float | None = None,
    timezoneOffset: int | None = None, # Minutes east of UTC
    calculationMethod: str | None = None,
    now: datetime | None = None,
    settings: Settings = Depends(get_settings),
):
    lat = settings.latitude if lat is None else lat
    lng = settings.longitude if lng is None else lng
    if timezoneOffset is None:
        # Server local zone, offset in force at `now`
        now = datetime.now().astimezone() if now is None else now.astimezone()
    else:
        tz = timezone(timedelta(minutes=timezoneOffset))
        if now is None:
            now = datetime.now(tz)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=tz)
        else:
            now = now.astimezone(tz)

    offset_hours = now.utcoffset().total_seconds() / 3600.0
    times = compute_prayer_times(now.date(), lat, lng, calculationMethod or settings.method, offset_hours)
    upcoming = next_prayer(times, now)
    if upcoming is None:
        raise HTTPException(status_code=404, detail="No prayer time is available for this location and date")

    return {
        "name": upcoming.name,
        "time": upcoming.time,
        "time12h": format_time_12h(upcoming.time),
        "at": upcoming.at.isoformat(),
        "countdown": get_countdown(upcoming.at, now),
    }


@app.get("/api/hijri")
def get_hijri(date: str):
    hijri = to_hijri(_parse_date(date))
    return {
        "hijri": str(hijri),
        "day": hijri.day,
        "month": hijri.month,
        "monthName": hijri.month_name,
        "year": hijri.year,
    }
