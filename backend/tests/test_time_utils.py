from datetime import datetime, timezone

import pytest

from runlog.core.time_utils import (
    parse_duration_minutes,
    parse_pace_minutes,
    parse_timestamp,
    to_local_datetime,
)


@pytest.mark.parametrize(
    "text, minutes",
    [("00:45:30", 45.5), ("1:30:00", 90.0), ("28:00", 28.0), ("31.5", 31.5)],
)
def test_parse_duration_minutes(text, minutes):
    assert parse_duration_minutes(text) == pytest.approx(minutes)


@pytest.mark.parametrize("text", ["", "1:2:3:4", "ab:cd"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration_minutes(text)


def test_parse_pace_minutes():
    assert parse_pace_minutes("8:30 /mi") == 8.5
    assert parse_pace_minutes("7.25") == 7.25
    with pytest.raises(ValueError):
        parse_pace_minutes("--")


def test_parse_timestamp_with_z():
    ts = parse_timestamp("2024-04-02T12:30:00Z")
    assert ts == datetime(2024, 4, 2, 12, 30, tzinfo=timezone.utc)


def test_naive_datetimes_are_treated_as_utc():
    local = to_local_datetime(datetime(2024, 1, 1, 2, 0), "local")
    assert local.tzinfo is not None
    assert local == datetime(2024, 1, 1, 2, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "text",
    ["2024-04-02T12:30:00.5Z", "2024-04-02T12:30:00.1234Z", "2024-04-02T12:30:00.500+00:00"],
)
def test_parse_timestamp_any_fraction(text):
    ts = parse_timestamp(text)
    assert ts.replace(microsecond=0) == datetime(2024, 4, 2, 12, 30, tzinfo=timezone.utc)
    assert ts.microsecond > 0


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("yesterday morning")
    with pytest.raises(ValueError):
        parse_timestamp("")
