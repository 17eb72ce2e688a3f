from runlog.schemas.goal import GoalProgress, GoalStatus


def _achievement_text(goal, progress: GoalProgress) -> str:
    has_distance = goal.target_distance is not None
    has_pace = goal.target_pace is not None

    if has_distance and has_pace:
        if progress.distance_achieved and progress.pace_achieved:
            return "Both distance and pace goals achieved!"
        if progress.distance_achieved:
            return "Distance achieved, pace goal remaining"
        if progress.pace_achieved:
            return "Pace achieved, distance goal remaining"
        return "Working towards both distance and pace goals"

    if has_distance:
        covered = progress.total_distance or 0.0
        if progress.distance_achieved:
            return f"Distance goal achieved: {covered:.1f}/{goal.target_distance:g} miles"
        return (
            f"Distance progress: {covered:.1f}/{goal.target_distance:g} miles "
            f"({progress.distance_progress:.1f}%)"
        )

    if has_pace:
        if progress.pace_achieved:
            return (
                f"Pace goal achieved: {progress.best_pace:.2f} min/mile "
                f"(target: {goal.target_pace:.2f})"
            )
        best = f"{progress.best_pace:.2f}" if progress.best_pace else "N/A"
        return f"Best pace: {best} min/mile (target: {goal.target_pace:.2f})"

    return ""


def progress_message(goal, progress: GoalProgress) -> str:
    """Human-readable status line for a goal's achievement/date quadrant."""
    if goal.completed:
        return "Goal completed"

    achievement = _achievement_text(goal, progress)
    if progress.status == GoalStatus.completed:
        return f"Goal automatically completed! {achievement}"
    if progress.status == GoalStatus.achieved_pending_date:
        return f"Goal achieved! Will auto-complete on {goal.target_date.isoformat()}"
    if progress.status == GoalStatus.overdue:
        return f"Target date reached. {achievement}"
    return achievement
