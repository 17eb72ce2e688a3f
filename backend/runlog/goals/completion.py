"""Goal progress and hybrid auto-completion.

A goal auto-completes only when its numeric target has been achieved AND its
target date has arrived. Achieving early leaves it open until the date;
reaching the date without achieving it leaves it overdue. Completion is never
undone here: a goal already marked completed stays completed.

Everything in this module is pure. ``today`` is always passed in so callers
decide which calendar (and timezone) a deadline is measured against.
"""

from datetime import date
from typing import Sequence

from runlog.core.calculations import fastest_run, total_distance
from runlog.schemas.goal import GoalProgress, GoalStatus


def _status(is_achieved: bool, is_date_reached: bool) -> GoalStatus:
    if is_achieved and is_date_reached:
        return GoalStatus.completed
    if is_achieved:
        return GoalStatus.achieved_pending_date
    if is_date_reached:
        return GoalStatus.overdue
    return GoalStatus.in_progress


def check_goal_completion(goal, runs: Sequence, today: date) -> GoalProgress:
    """Evaluate one goal against the run history as of `today`.

    `goal` needs ``target_date``, ``target_distance``, ``target_pace`` and
    ``completed``; `runs` need ``distance`` and ``pace``.
    """
    is_date_reached = today >= goal.target_date

    if goal.completed:
        return GoalProgress(
            is_achieved=True,
            is_date_reached=is_date_reached,
            is_completed=True,
            status=GoalStatus.completed,
        )

    has_distance = goal.target_distance is not None
    has_pace = goal.target_pace is not None

    progress = {}
    distance_achieved = None
    pace_achieved = None

    if has_distance:
        covered = total_distance(runs)
        distance_achieved = covered >= goal.target_distance
        progress["total_distance"] = covered
        progress["distance_progress"] = covered / goal.target_distance * 100

    if has_pace:
        fastest = fastest_run(runs)
        best_pace = float(fastest.pace) if fastest is not None else None
        pace_achieved = best_pace is not None and best_pace <= goal.target_pace
        progress["best_pace"] = best_pace
        if pace_achieved:
            progress["pace_progress"] = 100.0
        elif best_pace:
            progress["pace_progress"] = max(0.0, goal.target_pace / best_pace * 100)
        else:
            progress["pace_progress"] = 0.0

    if has_distance and has_pace:
        # Combined goals are conjunctive
        is_achieved = distance_achieved and pace_achieved
    elif has_distance:
        is_achieved = distance_achieved
    elif has_pace:
        is_achieved = pace_achieved
    else:
        is_achieved = False

    return GoalProgress(
        is_achieved=is_achieved,
        is_date_reached=is_date_reached,
        is_completed=is_achieved and is_date_reached,
        status=_status(is_achieved, is_date_reached),
        distance_achieved=distance_achieved,
        pace_achieved=pace_achieved,
        **progress,
    )


def check_all_goals_for_completion(goals: Sequence, runs: Sequence, today: date) -> list:
    """Goals that should now be persisted as completed.

    Returns copies with ``completed=True``; goals already completed are never
    returned, so re-running after persisting the result yields nothing new.
    """
    to_update = []
    for goal in goals:
        progress = check_goal_completion(goal, runs, today)
        if progress.is_completed and not goal.completed:
            to_update.append(goal.model_copy(update={"completed": True}))
    return to_update


def goal_progress_percentage(goal, progress: GoalProgress) -> float:
    """Single 0-100 figure for progress bars."""
    if progress.is_completed:
        return 100.0

    has_distance = goal.target_distance is not None
    has_pace = goal.target_pace is not None

    if has_distance and has_pace:
        return min(100.0, (progress.distance_progress + progress.pace_progress) / 2)
    if has_distance:
        return min(100.0, progress.distance_progress)
    if has_pace:
        return min(100.0, progress.pace_progress)
    return 0.0
