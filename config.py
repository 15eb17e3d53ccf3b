"""Service settings read from the environment (a .env file is loaded by index.py)."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from prayer_times import DEFAULT_METHOD

logger = logging.getLogger(__name__)

# Fallback location: Makkah
DEFAULT_LATITUDE = 21.4225
DEFAULT_LONGITUDE = 39.8262


@dataclass(frozen=True)
class Settings:
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    method: str = DEFAULT_METHOD
    log_level: str = "INFO"


def _float_setting(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", key, raw, default)
        return default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    SALAH_LATITUDE, SALAH_LONGITUDE, SALAH_METHOD, SALAH_LOG_LEVEL.
    Missing or malformed values fall back to Makkah / ISNA / INFO.
    """
    if environ is None:
        environ = os.environ
    return Settings(
        latitude=_float_setting(environ, "SALAH_LATITUDE", DEFAULT_LATITUDE),
        longitude=_float_setting(environ, "SALAH_LONGITUDE", DEFAULT_LONGITUDE),
        method=environ.get("SALAH_METHOD") or DEFAULT_METHOD,
        log_level=(environ.get("SALAH_LOG_LEVEL") or "INFO").upper(),
    )
