from pydantic import BaseModel, ConfigDict, Field, StrictBool
from datetime import date, datetime, time
from typing import Any, List, Optional


class ScheduleCreate(BaseModel):
    """Payload for scheduling an activity.

    Required fields are optional here so the scheduling service can report
    missing values as a 400 with the offending field name.
    """
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    activity_type: Optional[str] = None
    activity_details: Optional[str] = None
    notes: Optional[str] = None
    notify: Optional[StrictBool] = False


class ScheduleCompletionUpdate(BaseModel):
    """Loosely typed completion flag; coerced by the scheduling service."""
    is_completed: Any = None


class Schedule(BaseModel):
    schedule_id: int
    user_id: int
    scheduled_date: date
    scheduled_time: time
    activity_type: str
    activity_details: Optional[str] = None
    notes: Optional[str] = None
    is_completed: bool
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ActivityTypeStats(BaseModel):
    activity_type: str
    total_scheduled: int
    completed: int


class ScheduleStats(BaseModel):
    week_start: date
    week_end: date
    weekly_stats: List[ActivityTypeStats] = Field(default_factory=list)
    streak_days: int = 0
