"""GPS Exchange Format (GPX) activity parser."""

import logging
import math

import gpxpy
import gpxpy.gpx

from runlog.core.calculations import calculate_pace
from runlog.core.config import settings
from runlog.core.constants import DEFAULT_FEELING_RATING, EARTH_RADIUS_KM, KM_TO_MILES
from runlog.core.errors import ParseError
from runlog.core.time_utils import to_local_datetime
from runlog.schemas.run import ParsedRunRecord

logger = logging.getLogger(__name__)


def haversine_km(lat1, lon1, lat2, lon2):
    """Return great-circle distance in kilometers between two WGS84 points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def parse_gpx(content: str) -> ParsedRunRecord:
    """Turn a GPX track into one run.

    Duration is the span between the first and last timestamped points;
    distance is the sum of haversine hops between consecutive points.
    """
    try:
        gpx = gpxpy.parse(content)
    except (gpxpy.gpx.GPXException, ValueError) as e:
        raise ParseError(f"Invalid GPX file: {e}") from e

    if not gpx.tracks:
        raise ParseError("No track found in GPX file")

    points = [
        p
        for track in gpx.tracks
        for segment in track.segments
        for p in segment.points
    ]
    if len(points) < 2:
        raise ParseError("Insufficient track points for analysis")

    first, last = points[0], points[-1]
    if first.time is None or last.time is None:
        raise ParseError("No time data found in track points")

    duration_min = (last.time - first.time).total_seconds() / 60

    total_km = 0.0
    for a, b in zip(points, points[1:]):
        total_km += haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
    distance_mi = total_km * KM_TO_MILES

    if round(distance_mi, 2) <= 0 or round(duration_min, 2) <= 0:
        raise ParseError("Invalid distance or duration data")

    route = gpx.tracks[0].name or f"Imported from Garmin ({len(points)} GPS points)"

    logger.debug("Parsed GPX track: %d points, %.3f km, %.1f min", len(points), total_km, duration_min)

    return ParsedRunRecord(
        date=to_local_datetime(first.time, settings.timezone).date(),
        distance=round(distance_mi, 2),
        duration=round(duration_min, 2),
        pace=round(calculate_pace(distance_mi, duration_min), 2),
        route=route,
        notes="Imported from GPX file",
        feeling_rating=DEFAULT_FEELING_RATING,
    )
