"""
Runtime configuration

Values come from the environment, optionally seeded from a .env file next to
the package root.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')

# Reverse geocoding is rate limited, only look up again after this much movement
DEFAULT_GEOCODE_MIN_DISTANCE_METERS = 50.0
# Side of the square region shown around the user (~6 miles)
DEFAULT_REGION_IN_METERS = 10000.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    mapbox_access_token: str = ""
    mode: str = "prod"
    geocode_min_distance_m: float = DEFAULT_GEOCODE_MIN_DISTANCE_METERS
    region_in_meters: float = DEFAULT_REGION_IN_METERS
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            mapbox_access_token=os.environ.get('MAPBOX_ACCESS_TOKEN', ''),
            mode=os.environ.get('USERLOCATION_MODE', 'prod').lower(),
            geocode_min_distance_m=_float_env('GEOCODE_MIN_DISTANCE_METERS', DEFAULT_GEOCODE_MIN_DISTANCE_METERS),
            region_in_meters=_float_env('REGION_IN_METERS', DEFAULT_REGION_IN_METERS),
            http_timeout_s=_float_env('HTTP_TIMEOUT_SECONDS', DEFAULT_HTTP_TIMEOUT_SECONDS),
            log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))
