import re
from datetime import date, datetime, timezone

from dateutil.parser import isoparse


def _clock_parts(text: str) -> list[int]:
    """Split 'H:MM:SS'-like text into ints, dropping any unit suffixes."""
    parts = []
    for raw in text.split(":"):
        digits = re.sub(r"[^\d]", "", raw)
        if digits == "":
            raise ValueError(f"Invalid clock value: {text!r}")
        parts.append(int(digits))
    return parts


def _decimal(text: str) -> float:
    cleaned = re.sub(r"[^\d.\-]", "", text)
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f"Invalid number: {text!r}") from None


def parse_duration_minutes(text: str) -> float:
    """
    Convert a duration string to total minutes (float).

    Accepts 'HH:MM:SS', 'MM:SS' or bare decimal minutes.
    Example: '00:45:30' -> 45.5, '28:00' -> 28.0, '31.5' -> 31.5
    """
    s = (text or "").strip()
    if s == "":
        raise ValueError("Duration is empty")

    if ":" in s:
        parts = _clock_parts(s)
        if len(parts) == 3:
            hours, minutes, seconds = parts
            return hours * 60 + minutes + seconds / 60
        if len(parts) == 2:
            minutes, seconds = parts
            return minutes + seconds / 60
        raise ValueError("Duration must be in HH:MM:SS or MM:SS format")

    return _decimal(s)


def parse_pace_minutes(text: str) -> float:
    """
    Convert a pace string to minutes per mile.

    Accepts 'MM:SS' (with or without a unit suffix such as '/mi') or decimal
    minutes. Example: '8:30 /mi' -> 8.5
    """
    s = (text or "").strip()
    if s == "":
        raise ValueError("Pace is empty")

    if ":" in s:
        parts = _clock_parts(s)
        if len(parts) != 2:
            raise ValueError("Pace must be in MM:SS format")
        minutes, seconds = parts
        return minutes + seconds / 60

    return _decimal(s)


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp as written by GPS devices.

    Accepts a 'Z' suffix and fractional seconds of any precision.
    """
    s = (text or "").strip()
    if s == "":
        raise ValueError("Timestamp is empty")
    return isoparse(s)


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except ZoneInfoNotFoundError:
            return dt.astimezone()
    return dt.astimezone()


def local_today(tz_name: str | None = None) -> date:
    """Today's calendar date in the given tz ('local' or None = system tz)."""
    return to_local_datetime(datetime.now(timezone.utc), tz_name).date()
