"""Distance/pace math over run histories.

Functions here accept any objects exposing ``date``, ``distance`` (miles),
``duration`` (minutes) and ``pace`` (min/mile) attributes, so they work on
ORM rows, API schemas and parser output alike.
"""

from collections import OrderedDict
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence, TypeVar

from runlog.core.constants import MIN_PACE_DISTANCE_MI

R = TypeVar("R")

PERIODS = ("week", "month", "year", "all")


def calculate_pace(distance: float, duration: float) -> float:
    """Minutes per mile. Returns 0 for a zero distance (pace undefined)."""
    if distance == 0:
        return 0
    return duration / distance


def total_distance(runs: Iterable) -> float:
    return round(sum(float(r.distance) for r in runs), 2)


def average_pace(runs: Sequence) -> float:
    if len(runs) == 0:
        return 0

    distance = total_distance(runs)
    if distance == 0:
        return 0

    duration = sum(float(r.duration) for r in runs)
    return round(duration / distance, 2)


def longest_run(runs: Sequence[R]) -> Optional[R]:
    longest = None
    for run in runs:
        if longest is None or run.distance > longest.distance:
            longest = run
    return longest


def fastest_run(runs: Sequence[R]) -> Optional[R]:
    # Sub-mile runs give unreliable paces; a zero pace is undefined
    fastest = None
    for run in runs:
        if run.distance < MIN_PACE_DISTANCE_MI or run.pace <= 0:
            continue
        if fastest is None or run.pace < fastest.pace:
            fastest = run
    return fastest


def format_pace(pace: float) -> str:
    """Format pace as 'M:SS'. Example: 8.5 -> '8:30'."""
    if not pace:
        return "--:--"
    total_seconds = round(pace * 60)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_duration(duration: float) -> str:
    """Format minutes as 'H:MM:SS' or 'M:SS'. Example: 95.5 -> '1:35:30'."""
    if not duration:
        return "--:--"
    total_seconds = round(duration * 60)
    hours, rem = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def monday_of(d: date) -> date:
    # Monday = 0, Sunday = 6
    return d - timedelta(days=d.weekday())


def runs_in_period(runs: Sequence[R], period: str, today: date) -> list[R]:
    """Filter runs to the current week/month/year relative to `today`."""
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period!r}")
    if period == "all":
        return list(runs)
    if period == "week":
        start = monday_of(today)
        end = start + timedelta(days=6)
        return [r for r in runs if start <= r.date <= end]
    if period == "month":
        return [r for r in runs if (r.date.year, r.date.month) == (today.year, today.month)]
    return [r for r in runs if r.date.year == today.year]


def _grouped_stats(runs: Sequence, key, label: str) -> list[dict]:
    groups: "OrderedDict[date, list]" = OrderedDict()
    for run in sorted(runs, key=lambda r: r.date):
        groups.setdefault(key(run.date), []).append(run)

    return [
        {
            label: start,
            "total_miles": total_distance(items),
            "avg_pace": average_pace(items),
            "run_count": len(items),
        }
        for start, items in groups.items()
    ]


def weekly_stats(runs: Sequence) -> list[dict]:
    """Per-week totals keyed by the Monday starting each week."""
    return _grouped_stats(runs, monday_of, "week")


def monthly_stats(runs: Sequence) -> list[dict]:
    """Per-month totals keyed by the first day of each month."""
    return _grouped_stats(runs, lambda d: d.replace(day=1), "month")
