"""Location sample construction from raw position readings."""

import math
from dataclasses import dataclass
from datetime import datetime

from .models import LocationSample

COORDINATE_PRECISION = 4


@dataclass(frozen=True)
class PositionReading:
    """Raw latitude/longitude pair as delivered by a geolocation provider."""

    latitude: float
    longitude: float


def format_coordinates(latitude: float, longitude: float, precision: int = COORDINATE_PRECISION) -> str:
    """Format coordinates as a fallback address, e.g. ``-23.5505, -46.6333``."""
    return f"{latitude:.{precision}f}, {longitude:.{precision}f}"


def validate_reading(reading: PositionReading) -> None:
    """Raise ValueError unless the reading is a finite, in-range coordinate pair."""
    lat, lon = reading.latitude, reading.longitude
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError(f"Non-finite position reading: ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"Latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValueError(f"Longitude out of range: {lon}")


def make_location_sample(reading: PositionReading, captured_at: datetime) -> LocationSample:
    """Turn a reading and its capture instant into an addressed sample."""
    validate_reading(reading)
    return LocationSample(
        latitude=float(reading.latitude),
        longitude=float(reading.longitude),
        timestamp=captured_at,
        address=format_coordinates(reading.latitude, reading.longitude),
    )
