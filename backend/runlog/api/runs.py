from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from runlog.api.deps import CurrentUser, get_current_user, get_run_repo, get_today
from runlog.core.calculations import (
    PERIODS,
    average_pace,
    fastest_run,
    longest_run,
    monthly_stats,
    runs_in_period,
    total_distance,
    weekly_stats,
)
from runlog.db import get_db
from runlog.goals.sync import sync_goal_completion
from runlog.repositories.runs import RunRepository
from runlog.schemas.run import (
    MonthlyStatsPoint,
    RunCreate,
    RunRead,
    RunStats,
    RunUpdate,
    WeeklyStatsPoint,
)

router = APIRouter(prefix="/runs", tags=["runs"])


@router.post("/", response_model=RunRead)
def create_run(
    payload: RunCreate,
    repo: RunRepository = Depends(get_run_repo),
    user: CurrentUser = Depends(get_current_user),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    run = repo.create_run(payload)
    sync_goal_completion(db, user.id, today)
    return run


@router.get("/", response_model=list[RunRead])
def list_runs(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    repo: RunRepository = Depends(get_run_repo),
):
    """
    List runs, optionally filtered by [start_date, end_date].

    Most recent first, e.g.
      GET /runs?start_date=2025-01-06&end_date=2025-01-12
    """
    return repo.list_runs(start_date=start_date, end_date=end_date)


@router.get("/stats", response_model=RunStats)
def get_run_stats(
    period: str = Query("all"),
    repo: RunRepository = Depends(get_run_repo),
    today: date = Depends(get_today),
):
    if period not in PERIODS:
        raise HTTPException(status_code=422, detail=f"period must be one of {', '.join(PERIODS)}")

    runs = runs_in_period(repo.list_runs(), period, today)
    return RunStats(
        period=period,
        total_distance=total_distance(runs),
        average_pace=average_pace(runs),
        run_count=len(runs),
        longest_run=longest_run(runs),
        fastest_run=fastest_run(runs),
    )


@router.get("/weekly", response_model=list[WeeklyStatsPoint])
def get_weekly_stats(repo: RunRepository = Depends(get_run_repo)):
    return weekly_stats(repo.list_runs())


@router.get("/monthly", response_model=list[MonthlyStatsPoint])
def get_monthly_stats(repo: RunRepository = Depends(get_run_repo)):
    return monthly_stats(repo.list_runs())


@router.put("/{run_id}", response_model=RunRead)
def update_run(
    run_id: int,
    payload: RunUpdate,
    repo: RunRepository = Depends(get_run_repo),
    user: CurrentUser = Depends(get_current_user),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    run = repo.update_run(run_id, payload)
    if not run:
        raise HTTPException(status_code=404, detail="Run not found")
    sync_goal_completion(db, user.id, today)
    return run


@router.delete("/{run_id}")
def delete_run(
    run_id: int,
    repo: RunRepository = Depends(get_run_repo),
    user: CurrentUser = Depends(get_current_user),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    if not repo.delete_run(run_id):
        raise HTTPException(status_code=404, detail="Run not found")
    sync_goal_completion(db, user.id, today)
    return {"deleted": run_id}
