import logging
from datetime import date

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from runlog.api.deps import CurrentUser, get_current_user, get_run_repo, get_today
from runlog.db import get_db
from runlog.goals.sync import sync_goal_completion
from runlog.importers.orchestrator import ImportFile, import_files, import_summary
from runlog.repositories.runs import RunRepository
from runlog.schemas.imports import ImportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post("/", response_model=ImportResponse)
def import_activity_files(
    files: list[UploadFile] = File(...),
    repo: RunRepository = Depends(get_run_repo),
    user: CurrentUser = Depends(get_current_user),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Import a batch of TCX, GPX or CSV files; one result per file, in order."""
    # Content is read one file at a time by the importer
    uploads = [ImportFile(filename=f.filename or "import", stream=f.file) for f in files]
    logger.info("Importing %d file(s) for user %s", len(uploads), user.id)

    results = import_files(uploads, repo.create_run)
    summary = import_summary(results)

    completed = []
    if summary.runs_imported > 0:
        completed = sync_goal_completion(db, user.id, today)

    return ImportResponse(
        results=results,
        summary=summary,
        completed_goal_ids=[g.id for g in completed],
    )
