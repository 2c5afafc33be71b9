"""
User / profile request and response schemas.

POST   /users               → UserCreate      → UserResponse
GET    /profile             →                 → ProfileResponse
PATCH  /profile             → ProfileUpdate   → UserResponse
GET    /profile/export      →                 → ExportResponse
POST   /profile/checkin     → CheckinRequest  → CheckinResponse
GET    /profile/checkins    →                 → list[CheckinResponse]
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from liferpg.schemas.common import LevelResponse


class UserCreate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=128)
    nickname: Optional[str] = Field(default=None, max_length=64)
    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone name. Omit to use the server default.",
        examples=["Asia/Almaty"],
    )
    locale: str = Field(default="en", max_length=8)
    seed_actions: Optional[bool] = Field(
        default=None,
        description="Create the starter actions. Defaults to the SEED_DEFAULT_ACTIONS setting.",
    )


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=128)
    nickname: Optional[str] = Field(default=None, max_length=64)
    timezone: Optional[str] = None
    locale: Optional[str] = Field(default=None, max_length=8)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str]
    nickname: Optional[str]
    timezone: Optional[str]
    locale: str
    total_xp: int
    total_coins: int
    current_streak: int
    longest_streak: int
    last_active_date: Optional[date]
    avatar_stage: int


class ProfileCounts(BaseModel):
    log_entries: int
    kanban_tasks: int
    habits: int


class ProfileResponse(BaseModel):
    user: UserResponse
    level: LevelResponse
    avatar_title: str
    counts: ProfileCounts


class ExportResponse(BaseModel):
    """One CSV document per table, header row first."""
    exported_on: str = Field(description="Local date of the export, YYYY-MM-DD.")
    actions: str
    logs: str
    habits: str
    habit_logs: str


class CheckinRequest(BaseModel):
    day: Optional[date] = Field(default=None, description="Defaults to today in the user's timezone.")
    main_task_done: Optional[bool] = None
    total_tasks: Optional[int] = Field(default=None, ge=0)
    completed_tasks: Optional[int] = Field(default=None, ge=0)
    xp_earned: Optional[int] = Field(default=None, ge=0)
    energy_level: Optional[int] = Field(default=None, ge=1, le=5)
    mood_level: Optional[int] = Field(default=None, ge=1, le=5)
    note: Optional[str] = None


class CheckinResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    day: date
    main_task_done: bool
    total_tasks: int
    completed_tasks: int
    xp_earned: int
    energy_level: Optional[int]
    mood_level: Optional[int]
    note: Optional[str]
    created_at: Optional[datetime] = None
