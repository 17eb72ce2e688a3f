import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from runlog.core.config import settings
from runlog.core.time_utils import local_today
from runlog.goals.completion import check_all_goals_for_completion
from runlog.repositories.goals import GoalRepository
from runlog.repositories.runs import RunRepository
from runlog.schemas.goal import GoalRead

logger = logging.getLogger(__name__)


def sync_goal_completion(db: Session, user_id: str, today: Optional[date] = None) -> list[GoalRead]:
    """Re-evaluate a user's open goals and persist the ones that just completed.

    Called after every change to the user's runs or goals.
    """
    if today is None:
        today = local_today(settings.timezone)

    runs = RunRepository(db, user_id).list_runs()
    goals_repo = GoalRepository(db, user_id)
    newly_completed = check_all_goals_for_completion(goals_repo.list_goals(), runs, today)
    if not newly_completed:
        return []

    saved = goals_repo.mark_completed(g.id for g in newly_completed)
    logger.info(
        "Auto-completed %d goal(s) for user %s: %s",
        len(saved), user_id, ", ".join(g.name for g in saved),
    )
    return saved
