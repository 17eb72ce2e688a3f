import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GoalBase(BaseModel):
    name: str = Field(min_length=1)
    target_date: dt.date
    target_distance: Optional[float] = Field(default=None, gt=0)  # miles
    target_pace: Optional[float] = Field(default=None, gt=0)  # min/mile
    completed: bool = False
    description: Optional[str] = None


class GoalCreate(GoalBase):
    @model_validator(mode="after")
    def _require_target(self):
        if self.target_distance is None and self.target_pace is None:
            raise ValueError("A goal needs a target distance, a target pace, or both")
        return self


class GoalUpdate(BaseModel):
    """Partial update; the merged goal must still carry a target."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1)
    target_date: Optional[dt.date] = None
    target_distance: Optional[float] = Field(default=None, gt=0)
    target_pace: Optional[float] = Field(default=None, gt=0)
    completed: Optional[bool] = None
    description: Optional[str] = None


class GoalRead(GoalBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class GoalStatus(str, Enum):
    """Achievement x date-reached quadrant."""

    completed = "completed"
    achieved_pending_date = "achieved_pending_date"
    overdue = "overdue"
    in_progress = "in_progress"


class GoalProgress(BaseModel):
    is_achieved: bool
    is_date_reached: bool
    is_completed: bool
    status: GoalStatus
    # Percentages, uncapped; display layers clamp to 100
    distance_progress: Optional[float] = None
    pace_progress: Optional[float] = None
    # Figures the status text is built from
    total_distance: Optional[float] = None
    best_pace: Optional[float] = None
    distance_achieved: Optional[bool] = None
    pace_achieved: Optional[bool] = None


class GoalProgressRead(GoalProgress):
    goal_id: int
    goal_name: str
    percentage: float
    message: str
