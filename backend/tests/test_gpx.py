from datetime import date

import pytest

from runlog.core.errors import ParseError
from runlog.importers.gpx import haversine_km, parse_gpx


def gpx(points, name=None):
    trkpts = "".join(
        f'<trkpt lat="{lat}" lon="{lon}">' + (f"<time>{t}</time>" if t else "") + "</trkpt>"
        for lat, lon, t in points
    )
    name_el = f"<name>{name}</name>" if name else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        f"<trk>{name_el}<trkseg>{trkpts}</trkseg></trk></gpx>"
    )


def test_haversine_km():
    assert haversine_km(40.0, -75.0, 40.0, -75.0) == 0.0
    # 0.01 degree of latitude is ~1.112 km
    assert haversine_km(40.0, -75.0, 40.01, -75.0) == pytest.approx(1.11195, rel=1e-4)


def test_parses_track(sample):
    run = parse_gpx(sample("morning_run.gpx"))

    assert run.date == date(2024, 3, 10)
    # 2 x 1.112 km = 1.38 mi in 12 minutes
    assert run.distance == 1.38
    assert run.duration == 12.0
    assert run.pace == 8.68
    assert run.route == "Riverside Loop"
    assert run.notes == "Imported from GPX file"
    assert run.feeling_rating == 3


def test_route_falls_back_to_point_count():
    doc = gpx([
        (51.50, -0.12, "2024-06-01T09:00:00Z"),
        (51.51, -0.12, "2024-06-01T09:05:00Z"),
    ])
    run = parse_gpx(doc)
    assert run.route == "Imported from Garmin (2 GPS points)"


def test_stationary_track_is_rejected():
    doc = gpx([
        (40.0, -75.0, "2024-03-10T12:00:00Z"),
        (40.0, -75.0, "2024-03-10T12:01:00Z"),
    ])
    with pytest.raises(ParseError, match="Invalid distance or duration"):
        parse_gpx(doc)


def test_zero_duration_is_rejected():
    doc = gpx([
        (40.0, -75.0, "2024-03-10T12:00:00Z"),
        (40.01, -75.0, "2024-03-10T12:00:00Z"),
    ])
    with pytest.raises(ParseError, match="Invalid distance or duration"):
        parse_gpx(doc)


def test_needs_two_points():
    with pytest.raises(ParseError, match="Insufficient track points"):
        parse_gpx(gpx([(40.0, -75.0, "2024-03-10T12:00:00Z")]))


def test_needs_timestamps():
    doc = gpx([(40.0, -75.0, None), (40.01, -75.0, None)])
    with pytest.raises(ParseError, match="No time data"):
        parse_gpx(doc)


def test_needs_a_track():
    doc = (
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        '<wpt lat="40.0" lon="-75.0"><name>Start</name></wpt></gpx>'
    )
    with pytest.raises(ParseError, match="No track found"):
        parse_gpx(doc)


def test_invalid_gpx():
    with pytest.raises(ParseError, match="Invalid GPX file"):
        parse_gpx("<gpx><trk>")
