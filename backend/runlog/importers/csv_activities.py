"""Bulk activity import from CSV exports (Garmin Connect, Strava, ...).

The header row decides which columns hold the date, distance and time.
Rows that cannot be understood are skipped; only a missing required column
fails the whole file.
"""

import csv
import logging
import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

from runlog.core.calculations import calculate_pace
from runlog.core.constants import DEFAULT_FEELING_RATING, KM_TO_MILES, MAX_PLAUSIBLE_RUN_MI
from runlog.core.errors import ParseError
from runlog.core.time_utils import parse_duration_minutes, parse_pace_minutes
from runlog.schemas.run import ParsedRunRecord

logger = logging.getLogger(__name__)

# Header aliases, matched case-insensitively as substrings, in priority order
DATE_COLUMNS = ("date",)
DISTANCE_COLUMNS = ("distance",)
TIME_COLUMNS = ("time", "moving time", "elapsed time")
ACTIVITY_TYPE_COLUMNS = ("activity type", "sport")
TITLE_COLUMNS = ("title", "name")
PACE_COLUMNS = ("avg pace", "average pace", "pace")

RUNNING_KEYWORDS = ("run", "jog")


class SkipRow(ValueError):
    pass


def split_csv_line(line: str) -> list[str]:
    """Split one line on commas, keeping commas inside double quotes."""
    row = next(csv.reader([line], skipinitialspace=True), [])
    return [field.strip() for field in row]


def find_column(headers: list[str], aliases) -> int:
    for alias in aliases:
        for idx, header in enumerate(headers):
            if alias in header.lower():
                return idx
    return -1


def parse_activity_date(text: str) -> date:
    """Accepts 'M/D/YYYY', ISO dates/timestamps, or anything dateutil reads."""
    s = text.strip()
    if "/" in s:
        for candidate in (s, s.split()[0]):
            try:
                return datetime.strptime(candidate, "%m/%d/%Y").date()
            except ValueError:
                continue
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date_parser.parse(s).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {text!r}") from e


def parse_distance_miles(text: str) -> float:
    cleaned = re.sub(r"[^\d.\-]", "", text)
    try:
        distance = float(cleaned)
    except ValueError:
        raise ValueError(f"Invalid distance: {text!r}") from None
    if distance <= 0:
        raise ValueError(f"Distance must be > 0: {text!r}")
    # No plausible single run is this long in miles; assume kilometers
    if distance > MAX_PLAUSIBLE_RUN_MI:
        distance = distance * KM_TO_MILES
    return distance


def _value(values: list[str], idx: int) -> str:
    if idx == -1 or idx >= len(values):
        return ""
    return values[idx]


def _parse_row(values: list[str], cols: dict) -> ParsedRunRecord:
    needed = max(cols["date"], cols["distance"], cols["time"]) + 1
    if len(values) < needed:
        raise SkipRow("incomplete row")

    activity_type = _value(values, cols["activity_type"]).lower()
    if activity_type and not any(k in activity_type for k in RUNNING_KEYWORDS):
        raise SkipRow(f"not a run ({activity_type})")

    date_str = values[cols["date"]]
    distance_str = values[cols["distance"]]
    time_str = values[cols["time"]]
    if not date_str or not distance_str or not time_str:
        raise SkipRow("missing date, distance or time")

    run_date = parse_activity_date(date_str)
    distance = parse_distance_miles(distance_str)
    duration = parse_duration_minutes(time_str)
    if duration <= 0:
        raise SkipRow(f"duration must be > 0: {time_str!r}")

    pace = None
    pace_str = _value(values, cols["pace"])
    if pace_str:
        try:
            pace = parse_pace_minutes(pace_str)
        except ValueError:
            pace = None
    # A zero pace is "undefined", not infinitely fast
    if pace is None or round(pace, 2) <= 0:
        pace = calculate_pace(distance, duration)

    title = _value(values, cols["title"])
    return ParsedRunRecord(
        date=run_date,
        distance=round(distance, 2),
        duration=round(duration, 2),
        pace=round(pace, 2),
        route=title or "Imported from CSV",
        notes="Imported from CSV file",
        feeling_rating=DEFAULT_FEELING_RATING,
    )


def parse_csv(content: str) -> Optional[list[ParsedRunRecord]]:
    """Parse every running row of a CSV export.

    Returns None when there are no data rows or no row produced a valid run.
    Raises ParseError when the header lacks a Date, Distance or Time column.
    """
    lines = [line for line in content.splitlines() if line.strip()]
    if len(lines) < 2:
        logger.info("CSV file has no data rows")
        return None

    headers = [h.replace('"', "") for h in split_csv_line(lines[0])]
    cols = {
        "date": find_column(headers, DATE_COLUMNS),
        "distance": find_column(headers, DISTANCE_COLUMNS),
        "time": find_column(headers, TIME_COLUMNS),
        "activity_type": find_column(headers, ACTIVITY_TYPE_COLUMNS),
        "title": find_column(headers, TITLE_COLUMNS),
        "pace": find_column(headers, PACE_COLUMNS),
    }
    if -1 in (cols["date"], cols["distance"], cols["time"]):
        raise ParseError("CSV must contain Date, Distance, and Time columns")

    runs: list[ParsedRunRecord] = []
    for line_no, line in enumerate(lines[1:], start=2):
        try:
            runs.append(_parse_row(split_csv_line(line), cols))
        except (ValueError, csv.Error) as e:
            logger.debug("Skipping CSV row %d: %s", line_no, e)

    logger.info("Parsed %d runs from %d CSV rows", len(runs), len(lines) - 1)
    return runs or None
