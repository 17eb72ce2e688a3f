"""User-scoped run storage.

Every repository instance is bound to one user id; rows owned by anyone else
are invisible to it.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from runlog.core.calculations import calculate_pace
from runlog.core.errors import PersistenceError
from runlog.models.run import Run
from runlog.schemas.run import RunCreate, RunRead, RunUpdate

logger = logging.getLogger(__name__)


class RunRepository:
    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def _query(self):
        return self.db.query(Run).filter(Run.user_id == self.user_id)

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s for user %s: %s", action, self.user_id, e)
            raise PersistenceError(f"Failed to {action}: {e}") from e

    def _get_row(self, run_id: int) -> Optional[Run]:
        return self._query().filter(Run.id == run_id).first()

    def list_runs(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[RunRead]:
        """Runs within [start_date, end_date], most recent first."""
        query = self._query()
        if start_date is not None:
            query = query.filter(Run.date >= start_date)
        if end_date is not None:
            query = query.filter(Run.date <= end_date)
        try:
            rows = query.order_by(Run.date.desc(), Run.id.desc()).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list runs: {e}") from e
        return [RunRead.model_validate(r) for r in rows]

    def get_run(self, run_id: int) -> Optional[RunRead]:
        row = self._get_row(run_id)
        return RunRead.model_validate(row) if row else None

    def create_run(self, payload: RunCreate) -> RunRead:
        """Persist a run. Only parser records carry their own pace."""
        data = payload.model_dump()
        if data.get("pace") is None:
            data["pace"] = round(calculate_pace(payload.distance, payload.duration), 2)
        run = Run(user_id=self.user_id, **data)
        self.db.add(run)
        self._commit("save run")
        self.db.refresh(run)
        return RunRead.model_validate(run)

    def update_run(self, run_id: int, payload: RunUpdate) -> Optional[RunRead]:
        run = self._get_row(run_id)
        if not run:
            return None

        update_data = payload.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key in ("date", "distance", "duration", "feeling_rating"):
                continue
            setattr(run, key, value)

        # Keep the stored pace consistent with an edited distance/duration
        if "distance" in update_data or "duration" in update_data:
            run.pace = round(calculate_pace(float(run.distance), float(run.duration)), 2)

        self._commit("update run")
        self.db.refresh(run)
        return RunRead.model_validate(run)

    def delete_run(self, run_id: int) -> bool:
        run = self._get_row(run_id)
        if not run:
            return False
        self.db.delete(run)
        self._commit("delete run")
        return True
