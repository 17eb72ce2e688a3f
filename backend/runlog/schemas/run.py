import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from runlog.core.calculations import calculate_pace
from runlog.core.constants import DEFAULT_FEELING_RATING


class RunBase(BaseModel):
    date: dt.date
    distance: float = Field(gt=0)  # miles, e.g. 3.1
    duration: float = Field(gt=0)  # minutes, e.g. 28.5
    route: Optional[str] = None
    notes: Optional[str] = None
    feeling_rating: int = Field(default=DEFAULT_FEELING_RATING, ge=1, le=5)


class RunCreate(RunBase):
    """Schema for creating a new run.

    Pace is not accepted from clients; the repository derives it from
    distance and duration.
    """


class ParsedRunRecord(RunCreate):
    """Normalized output of an activity-file parser, prior to persistence.

    Keeps the pace reported by the file when there is one, otherwise derives it.
    """

    pace: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _fill_pace(self):
        if self.pace is None:
            self.pace = round(calculate_pace(self.distance, self.duration), 2)
        return self


class RunUpdate(BaseModel):
    """Schema for updating an existing run (all fields optional)."""

    model_config = ConfigDict(extra="ignore")

    date: Optional[dt.date] = None
    distance: Optional[float] = Field(default=None, gt=0)
    duration: Optional[float] = Field(default=None, gt=0)
    route: Optional[str] = None
    notes: Optional[str] = None
    feeling_rating: Optional[int] = Field(default=None, ge=1, le=5)


class RunRead(RunBase):
    """Schema returned to the frontend when reading a run."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    pace: float  # minutes per mile


class RunStats(BaseModel):
    period: str
    total_distance: float
    average_pace: float
    run_count: int
    longest_run: Optional[RunRead] = None
    fastest_run: Optional[RunRead] = None


class WeeklyStatsPoint(BaseModel):
    week: dt.date
    total_miles: float
    avg_pace: float
    run_count: int


class MonthlyStatsPoint(BaseModel):
    month: dt.date
    total_miles: float
    avg_pace: float
    run_count: int
