"""
Habit schemas. `level_title` and `progress` come from the habit level curve;
`logs` carries the recent logged days so clients can draw the log grid.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from liferpg.models.action import Block
from liferpg.models.habit import HabitFrequency


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    block: Block
    frequency: Optional[HabitFrequency] = None
    custom_days: Optional[list[int]] = Field(
        default=None, description="Weekday numbers, 0 = Monday. Used with CUSTOM."
    )
    target_per_week: Optional[int] = Field(default=None, ge=1, le=7)
    xp_per_log: Optional[int] = Field(default=None, gt=0)


class HabitLogItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    xp_awarded: int


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    block: Block
    frequency: HabitFrequency
    custom_days: list[int]
    target_per_week: Optional[int]
    xp_per_log: int
    total_logs: int
    level: int
    level_title: str
    level_progress: float
    current_streak: int
    longest_streak: int
    is_active: bool
    logs: list[HabitLogItem] = Field(
        default_factory=list, description="Most recent logged days, newest first."
    )


class HabitLogRequest(BaseModel):
    day: Optional[date] = Field(default=None, description="Defaults to today in the user's timezone.")
    completed: bool = Field(default=True, description="false removes the day's log.")


class HabitLogResponse(BaseModel):
    habit_id: int
    day: date
    logged: bool
    created: bool
    xp_awarded: int
    xp_reversed: int
    level: int
    level_title: str
