import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from runlog.core.errors import PersistenceError
from runlog.models.goal import Goal
from runlog.schemas.goal import GoalCreate, GoalRead, GoalUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "target_date", "completed")


class GoalRepository:
    """Goal storage scoped to a single user."""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def _query(self):
        return self.db.query(Goal).filter(Goal.user_id == self.user_id)

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s for user %s: %s", action, self.user_id, e)
            raise PersistenceError(f"Failed to {action}: {e}") from e

    def _get_row(self, goal_id: int) -> Optional[Goal]:
        return self._query().filter(Goal.id == goal_id).first()

    def list_goals(self) -> list[GoalRead]:
        try:
            rows = self._query().order_by(Goal.target_date, Goal.id).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list goals: {e}") from e
        return [GoalRead.model_validate(r) for r in rows]

    def get_goal(self, goal_id: int) -> Optional[GoalRead]:
        row = self._get_row(goal_id)
        return GoalRead.model_validate(row) if row else None

    def create_goal(self, payload: GoalCreate) -> GoalRead:
        goal = Goal(user_id=self.user_id, **payload.model_dump())
        self.db.add(goal)
        self._commit("save goal")
        self.db.refresh(goal)
        return GoalRead.model_validate(goal)

    def update_goal(self, goal_id: int, payload: GoalUpdate) -> Optional[GoalRead]:
        """Apply a partial update. Raises ValueError if it would leave no target."""
        goal = self._get_row(goal_id)
        if not goal:
            return None

        update_data = payload.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            setattr(goal, key, value)

        if goal.target_distance is None and goal.target_pace is None:
            self.db.rollback()
            raise ValueError("A goal needs a target distance, a target pace, or both")

        self._commit("update goal")
        self.db.refresh(goal)
        return GoalRead.model_validate(goal)

    def delete_goal(self, goal_id: int) -> bool:
        goal = self._get_row(goal_id)
        if not goal:
            return False
        self.db.delete(goal)
        self._commit("delete goal")
        return True

    def mark_completed(self, goal_ids: Iterable[int]) -> list[GoalRead]:
        """Flip the given goals to completed in one transaction."""
        ids = list(goal_ids)
        if not ids:
            return []
        rows = self._query().filter(Goal.id.in_(ids)).all()
        for row in rows:
            row.completed = True
        self._commit("complete goals")
        return [GoalRead.model_validate(r) for r in rows]
