from datetime import date
from typing import Optional

from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from runlog.core.config import settings
from runlog.core.time_utils import local_today
from runlog.db import get_db
from runlog.repositories.goals import GoalRepository
from runlog.repositories.runs import RunRepository


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
) -> CurrentUser:
    """Identity forwarded by the auth proxy in front of the API."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return CurrentUser(id=x_user_id.strip(), email=x_user_email)


def get_today() -> date:
    return local_today(settings.timezone)


def get_run_repo(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RunRepository:
    return RunRepository(db, user.id)


def get_goal_repo(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> GoalRepository:
    return GoalRepository(db, user.id)
