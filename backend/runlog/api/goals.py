from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from runlog.api.deps import CurrentUser, get_current_user, get_goal_repo, get_run_repo, get_today
from runlog.db import get_db
from runlog.goals.completion import check_goal_completion, goal_progress_percentage
from runlog.goals.messages import progress_message
from runlog.goals.sync import sync_goal_completion
from runlog.repositories.goals import GoalRepository
from runlog.repositories.runs import RunRepository
from runlog.schemas.goal import GoalCreate, GoalProgressRead, GoalRead, GoalUpdate


router = APIRouter(prefix="/goals", tags=["goals"])


def _refreshed(repo: GoalRepository, goal_id: int) -> GoalRead:
    goal = repo.get_goal(goal_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.get("/", response_model=list[GoalRead])
def list_goals(repo: GoalRepository = Depends(get_goal_repo)):
    return repo.list_goals()


@router.post("/", response_model=GoalRead)
def create_goal(
    payload: GoalCreate,
    repo: GoalRepository = Depends(get_goal_repo),
    user: CurrentUser = Depends(get_current_user),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    goal = repo.create_goal(payload)
    sync_goal_completion(db, user.id, today)
    # May have been auto-completed on creation
    return _refreshed(repo, goal.id)


@router.get("/progress", response_model=list[GoalProgressRead])
def list_goal_progress(
    goals: GoalRepository = Depends(get_goal_repo),
    runs: RunRepository = Depends(get_run_repo),
    today: date = Depends(get_today),
):
    history = runs.list_runs()
    results = []
    for goal in goals.list_goals():
        progress = check_goal_completion(goal, history, today)
        results.append(
            GoalProgressRead(
                goal_id=goal.id,
                goal_name=goal.name,
                percentage=goal_progress_percentage(goal, progress),
                message=progress_message(goal, progress),
                **progress.model_dump(),
            )
        )
    return results


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    repo: GoalRepository = Depends(get_goal_repo),
    user: CurrentUser = Depends(get_current_user),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    try:
        goal = repo.update_goal(goal_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    sync_goal_completion(db, user.id, today)
    return _refreshed(repo, goal_id)


@router.post("/{goal_id}/toggle", response_model=GoalRead)
def toggle_goal_completion(goal_id: int, repo: GoalRepository = Depends(get_goal_repo)):
    """Manual completion switch. Not followed by auto-completion, so a user
    can reopen a goal that would otherwise complete itself."""
    goal = _refreshed(repo, goal_id)
    return repo.update_goal(goal_id, GoalUpdate(completed=not goal.completed))


@router.delete("/{goal_id}")
def delete_goal(goal_id: int, repo: GoalRepository = Depends(get_goal_repo)):
    if not repo.delete_goal(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"deleted": goal_id}
