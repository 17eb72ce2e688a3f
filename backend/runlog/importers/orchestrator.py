"""Drive a batch of uploaded files through detection, parsing and persistence.

Files are processed one after another so results come back in upload order
and a failing file is fully dealt with before the next one starts. Nothing
raised while handling a file escapes: it becomes that file's ImportResult.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional, Sequence, Union

from runlog.core.config import settings
from runlog.core.errors import ActivityImportError, PersistenceError
from runlog.importers.csv_activities import parse_csv
from runlog.importers.detect import decode_content, detect_format, unsupported_message
from runlog.importers.gpx import parse_gpx
from runlog.importers.tcx import parse_tcx
from runlog.schemas.imports import FileFormat, ImportResult, ImportSummary
from runlog.schemas.run import RunCreate, RunRead

logger = logging.getLogger(__name__)

CreateRun = Callable[[RunCreate], RunRead]

SINGLE_RUN_PARSERS = {
    FileFormat.tcx: parse_tcx,
    FileFormat.gpx: parse_gpx,
}


@dataclass
class ImportFile:
    """One uploaded file, given either as content or as an unread stream."""

    filename: str
    content: Union[bytes, str, None] = None
    stream: Optional[BinaryIO] = None

    def read(self, limit: int) -> Union[bytes, str]:
        """Content, reading at most `limit` bytes when backed by a stream."""
        if self.stream is not None:
            return self.stream.read(limit)
        return self.content or b""


def _failed(upload: ImportFile, fmt: FileFormat, message: str) -> ImportResult:
    logger.warning("Import of %s failed: %s", upload.filename, message)
    return ImportResult(file_name=upload.filename, success=False, message=message, format=fmt)


def _import_csv(upload: ImportFile, text: str, create_run: CreateRun) -> ImportResult:
    records = parse_csv(text)
    if not records:
        return _failed(upload, FileFormat.csv, "No valid run data found in CSV file.")

    saved: list[RunRead] = []
    failed = 0
    for record in records:
        try:
            saved.append(create_run(record))
        except Exception as e:
            failed += 1
            logger.warning("Could not save run from %s (%s): %s", upload.filename, record.date, e)

    message = f"Imported {len(saved)} runs successfully"
    if failed > 0:
        message += f", {failed} failed"
    logger.info("%s: %s", upload.filename, message)

    return ImportResult(
        file_name=upload.filename,
        success=len(saved) > 0,
        message=message,
        format=FileFormat.csv,
        run_count=len(saved),
        runs=saved,
    )


def _import_single(upload: ImportFile, fmt: FileFormat, text: str, create_run: CreateRun) -> ImportResult:
    record = SINGLE_RUN_PARSERS[fmt](text)
    run = create_run(record)
    message = f"Successfully imported run: {record.distance} miles on {record.date.isoformat()}"
    logger.info("%s: %s", upload.filename, message)
    return ImportResult(
        file_name=upload.filename,
        success=True,
        message=message,
        format=fmt,
        runs=[run],
    )


def import_file(upload: ImportFile, create_run: CreateRun) -> ImportResult:
    # One byte past the limit is enough to tell the file is too large
    content = upload.read(settings.max_upload_bytes + 1)

    fmt = detect_format(content, upload.filename)
    if fmt in (FileFormat.fit, FileFormat.unknown):
        return _failed(upload, fmt, unsupported_message(fmt))

    if len(content) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes / (1024 * 1024)
        return _failed(upload, fmt, f"File is too large (limit {limit_mb:g} MB).")

    try:
        text = decode_content(content)
    except UnicodeDecodeError as e:
        return _failed(upload, fmt, f"Error processing file: {e}")

    try:
        if fmt == FileFormat.csv:
            return _import_csv(upload, text, create_run)
        return _import_single(upload, fmt, text, create_run)
    except ActivityImportError as e:
        return _failed(upload, fmt, f"Could not parse run data from file: {e}")
    except PersistenceError as e:
        return _failed(upload, fmt, f"Error processing file: {e}")
    except Exception as e:
        logger.exception("Unexpected error importing %s", upload.filename)
        return _failed(upload, fmt, f"Error processing file: {e}")


def import_files(files: Sequence[ImportFile], create_run: CreateRun) -> list[ImportResult]:
    """Import every file in order; one ImportResult per input file.

    Stream-backed files are read only when their turn comes, so at most one
    file's content is held at a time.
    """
    return [import_file(upload, create_run) for upload in files]


def import_summary(results: Sequence[ImportResult]) -> ImportSummary:
    succeeded = sum(1 for r in results if r.success)
    return ImportSummary(
        files=len(results),
        succeeded=succeeded,
        failed=len(results) - succeeded,
        runs_imported=sum(
            r.run_count if r.run_count is not None else (1 if r.success else 0)
            for r in results
        ),
    )
