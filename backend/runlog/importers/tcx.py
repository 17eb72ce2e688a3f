"""Training Center XML (Garmin TCX) activity parser.

One file yields one run: every lap's DistanceMeters and TotalTimeSeconds
are summed so multi-lap activities import as a single run.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterator, Optional

from runlog.core.calculations import calculate_pace
from runlog.core.config import settings
from runlog.core.constants import DEFAULT_FEELING_RATING, METERS_TO_MILES
from runlog.core.errors import ParseError
from runlog.core.time_utils import parse_timestamp, to_local_datetime
from runlog.schemas.run import ParsedRunRecord

logger = logging.getLogger(__name__)


def _local(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1]


def _iter_named(root: ET.Element, name: str) -> Iterator[ET.Element]:
    for el in root.iter():
        if _local(el.tag) == name:
            yield el


def _child(el: ET.Element, name: str) -> Optional[ET.Element]:
    for c in el:
        if _local(c.tag) == name:
            return c
    return None


def _float_text(el: ET.Element) -> float:
    try:
        return float((el.text or "0").strip())
    except ValueError:
        raise ParseError(f"Invalid number in <{_local(el.tag)}>: {el.text!r}") from None


def _start_time(activity: ET.Element) -> Optional[str]:
    start = activity.get("Id")
    if not start:
        id_el = _child(activity, "Id")
        start = id_el.text.strip() if id_el is not None and id_el.text else None
    return start or None


def parse_tcx(content: str) -> ParsedRunRecord:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ParseError("Invalid XML format") from e

    activity = next(_iter_named(root, "Activity"), None)
    if activity is None:
        raise ParseError("No activity found in TCX file")

    start = _start_time(activity)
    if not start:
        raise ParseError("No start time found")
    try:
        started_at = parse_timestamp(start)
    except ValueError as e:
        raise ParseError(f"Invalid start time: {start}") from e

    total_m = 0.0
    total_s = 0.0
    laps = 0
    for lap in _iter_named(root, "Lap"):
        dist_el = _child(lap, "DistanceMeters")
        time_el = _child(lap, "TotalTimeSeconds")
        if dist_el is None or time_el is None:
            continue
        total_m += _float_text(dist_el)
        total_s += _float_text(time_el)
        laps += 1

    distance_mi = total_m * METERS_TO_MILES
    duration_min = total_s / 60
    if round(distance_mi, 2) <= 0 or round(duration_min, 2) <= 0:
        raise ParseError("Invalid distance or duration data")

    sport = activity.get("Sport") or "Running"
    points = sum(1 for _ in _iter_named(root, "Trackpoint"))
    route = f"Imported from Garmin ({points} GPS points)" if points > 0 else None

    logger.debug(
        "Parsed TCX activity: %d laps, %.0f m, %.0f s, %d points",
        laps, total_m, total_s, points,
    )

    return ParsedRunRecord(
        date=to_local_datetime(started_at, settings.timezone).date(),
        distance=round(distance_mi, 2),
        duration=round(duration_min, 2),
        pace=round(calculate_pace(distance_mi, duration_min), 2),
        route=route,
        notes=f"Imported from TCX file - Sport: {sport}",
        feeling_rating=DEFAULT_FEELING_RATING,
    )
