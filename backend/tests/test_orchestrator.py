import io

import pytest

from runlog.core.errors import PersistenceError
from runlog.importers import orchestrator
from runlog.importers.orchestrator import ImportFile, import_files, import_summary
from runlog.schemas.imports import FileFormat
from runlog.schemas.run import RunRead


class FakeStore:
    """Stands in for the run repository's create call."""

    def __init__(self, fail_on=()):
        self.saved = []
        self.fail_on = set(fail_on)
        self.calls = 0

    def create_run(self, record):
        self.calls += 1
        if self.calls in self.fail_on:
            raise PersistenceError("database unavailable")
        run = RunRead(id=len(self.saved) + 1, **record.model_dump())
        self.saved.append(run)
        return run


def test_csv_with_one_bad_row():
    content = (
        "Date,Distance,Time,Activity Type\n"
        "1/1/2024,3.1,28:00,Running\n"
        "1/2/2024,-1,10:00,Running\n"
    )
    store = FakeStore()
    [result] = import_files([ImportFile("runs.csv", content)], store.create_run)

    assert result.success is True
    assert result.format == FileFormat.csv
    assert result.run_count == 1
    assert result.message == "Imported 1 runs successfully"
    assert len(store.saved) == 1


def test_unsupported_files_never_reach_a_parser(monkeypatch):
    def boom(*_):
        raise AssertionError("parser should not run")

    monkeypatch.setattr(orchestrator, "parse_csv", boom)
    monkeypatch.setattr(orchestrator, "SINGLE_RUN_PARSERS", {FileFormat.tcx: boom, FileFormat.gpx: boom})

    store = FakeStore()
    results = import_files(
        [ImportFile("watch.fit", b"\x0e\x10\xd9\x07"), ImportFile("notes", "hello world")],
        store.create_run,
    )

    fit, unknown = results
    assert fit.success is False
    assert fit.format == FileFormat.fit
    assert "TCX or GPX" in fit.message
    assert unknown.success is False
    assert "Unsupported file format" in unknown.message
    assert store.calls == 0


def test_batch_keeps_order_and_isolates_failures(sample):
    files = [
        ImportFile("broken.gpx", "<gpx><trk>"),
        ImportFile("morning_run.gpx", sample("morning_run.gpx").encode("utf-8")),
        ImportFile("activities.csv", sample("activities.csv")),
        ImportFile("two_laps.tcx", sample("two_laps.tcx")),
    ]
    store = FakeStore()
    results = import_files(files, store.create_run)

    assert [r.file_name for r in results] == [f.filename for f in files]
    assert [r.success for r in results] == [False, True, True, True]
    assert results[0].message.startswith("Could not parse run data from file: Invalid GPX file")
    assert results[1].message == "Successfully imported run: 1.38 miles on 2024-03-10"
    assert results[2].run_count == 3
    assert results[3].message == "Successfully imported run: 3.11 miles on 2024-04-02"
    assert len(store.saved) == 5

    summary = import_summary(results)
    assert summary.files == 4
    assert summary.succeeded == 3
    assert summary.failed == 1
    assert summary.runs_imported == 5


def test_csv_persistence_failures_are_counted(sample):
    store = FakeStore(fail_on={2})
    [result] = import_files([ImportFile("activities.csv", sample("activities.csv"))], store.create_run)

    assert result.success is True
    assert result.run_count == 2
    assert result.message == "Imported 2 runs successfully, 1 failed"


def test_csv_where_every_save_fails(sample):
    store = FakeStore(fail_on={1, 2, 3})
    [result] = import_files([ImportFile("activities.csv", sample("activities.csv"))], store.create_run)

    assert result.success is False
    assert result.message == "Imported 0 runs successfully, 3 failed"


def test_csv_without_valid_rows():
    content = "Date,Distance,Time\n2024-01-01,0,30:00\n"
    [result] = import_files([ImportFile("empty.csv", content)], FakeStore().create_run)

    assert result.success is False
    assert result.message == "No valid run data found in CSV file."


def test_single_run_persistence_failure(sample):
    store = FakeStore(fail_on={1})
    results = import_files(
        [ImportFile("a.tcx", sample("two_laps.tcx")), ImportFile("b.tcx", sample("two_laps.tcx"))],
        store.create_run,
    )

    assert results[0].success is False
    assert results[0].message == "Error processing file: database unavailable"
    assert results[1].success is True


def test_undecodable_text_file():
    [result] = import_files([ImportFile("runs.csv", b"\xff\xfe\x00D\x00a")], FakeStore().create_run)

    assert result.success is False
    assert result.message.startswith("Error processing file:")


def test_oversized_file(monkeypatch):
    monkeypatch.setattr(orchestrator.settings, "max_upload_bytes", 10)
    [result] = import_files([ImportFile("runs.csv", "Date,Distance,Time\n" * 5)], FakeStore().create_run)

    assert result.success is False
    assert "too large" in result.message


@pytest.mark.parametrize("name", ["a.tcx", "b.gpx", "c.csv"])
def test_structural_errors_become_results(name):
    store = FakeStore()
    [result] = import_files([ImportFile(name, "")], store.create_run)
    assert result.success is False
    assert store.calls == 0


class CountingStream(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.requested = []

    def read(self, size=-1):
        self.requested.append(size)
        return super().read(size)


def test_streams_are_read_lazily_and_bounded(monkeypatch):
    monkeypatch.setattr(orchestrator.settings, "max_upload_bytes", 100)
    small = CountingStream(b"Date,Distance,Time\n2024-01-01,3,27:00\n")
    big = CountingStream(b"Date,Distance,Time\n" + b"2024-01-01,3,27:00\n" * 50)
    store = FakeStore()
    untouched = []

    def create_run(record):
        untouched.append(big.requested == [])
        return store.create_run(record)

    results = import_files(
        [ImportFile("small.csv", stream=small), ImportFile("big.csv", stream=big)],
        create_run,
    )

    assert results[0].success is True
    assert untouched == [True]
    # Never more than limit + 1 bytes of the oversized file
    assert big.requested == [101]
    assert results[1].success is False
    assert "too large" in results[1].message


def test_header_only_csv_reports_no_data():
    [result] = import_files([ImportFile("empty.csv", "Date,Distance,Time\n")], FakeStore().create_run)

    assert result.success is False
    assert result.message == "No valid run data found in CSV file."
