from datetime import date

import pytest

from runlog.core.errors import ParseError
from runlog.importers.tcx import parse_tcx


def tcx(activity_attrs='Sport="Running"', body=""):
    return (
        '<TrainingCenterDatabase xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2">'
        f"<Activities><Activity {activity_attrs}>{body}</Activity></Activities>"
        "</TrainingCenterDatabase>"
    )


def test_parses_multi_lap_activity_as_one_run(sample):
    run = parse_tcx(sample("two_laps.tcx"))

    assert run.date == date(2024, 4, 2)
    # 5000 m over 30 minutes
    assert run.distance == 3.11
    assert run.duration == 30.0
    assert run.pace == 9.66
    assert run.route == "Imported from Garmin (3 GPS points)"
    assert run.notes == "Imported from TCX file - Sport: Running"
    assert run.feeling_rating == 3


def test_start_time_from_id_attribute_without_trackpoints():
    body = "<Lap><TotalTimeSeconds>600</TotalTimeSeconds><DistanceMeters>1609.34</DistanceMeters></Lap>"
    run = parse_tcx(tcx('Sport="Other" Id="2024-01-20T15:00:00Z"', body))

    assert run.date == date(2024, 1, 20)
    assert run.distance == 1.0
    assert run.duration == 10.0
    assert run.route is None
    assert run.notes.endswith("Sport: Other")


def test_missing_activity():
    with pytest.raises(ParseError, match="No activity"):
        parse_tcx("<TrainingCenterDatabase><Activities/></TrainingCenterDatabase>")


def test_missing_start_time():
    body = "<Lap><TotalTimeSeconds>600</TotalTimeSeconds><DistanceMeters>1600</DistanceMeters></Lap>"
    with pytest.raises(ParseError, match="No start time"):
        parse_tcx(tcx(body=body))


def test_zero_totals_are_rejected():
    with pytest.raises(ParseError, match="Invalid distance or duration"):
        parse_tcx(tcx(body="<Id>2024-01-20T15:00:00Z</Id>"))

    body = (
        "<Id>2024-01-20T15:00:00Z</Id>"
        "<Lap><TotalTimeSeconds>600</TotalTimeSeconds><DistanceMeters>0</DistanceMeters></Lap>"
    )
    with pytest.raises(ParseError, match="Invalid distance or duration"):
        parse_tcx(tcx(body=body))


def test_invalid_xml():
    with pytest.raises(ParseError, match="Invalid XML"):
        parse_tcx("<TrainingCenterDatabase><Activities>")


def test_start_time_with_short_fraction():
    body = (
        "<Id>2024-01-20T15:00:00.5Z</Id>"
        "<Lap><TotalTimeSeconds>600</TotalTimeSeconds><DistanceMeters>1609.34</DistanceMeters></Lap>"
    )
    run = parse_tcx(tcx(body=body))
    assert run.date == date(2024, 1, 20)
    assert run.distance == 1.0
