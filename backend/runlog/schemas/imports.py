from enum import Enum
from typing import Optional

from pydantic import BaseModel

from runlog.schemas.run import RunRead


class FileFormat(str, Enum):
    tcx = "tcx"
    gpx = "gpx"
    csv = "csv"
    fit = "fit"
    unknown = "unknown"


class ImportResult(BaseModel):
    """Outcome of importing one file."""

    file_name: str
    success: bool
    message: str
    format: FileFormat = FileFormat.unknown
    run_count: Optional[int] = None  # CSV only
    runs: list[RunRead] = []


class ImportSummary(BaseModel):
    files: int
    succeeded: int
    failed: int
    runs_imported: int


class ImportResponse(BaseModel):
    results: list[ImportResult]
    summary: ImportSummary
    completed_goal_ids: list[int] = []
