"""
Actions and action-log schemas.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from liferpg.models.action import Block, Difficulty


class ActionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    block: Block
    xp: int = Field(gt=0, examples=[10])
    difficulty: Optional[Difficulty] = None


class ActionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=256)
    block: Optional[Block] = None
    xp: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[Difficulty] = None
    is_active: Optional[bool] = None


class ActionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    block: Block
    xp: int
    difficulty: Difficulty
    is_active: bool


class SeedResponse(BaseModel):
    created: int


class LogCreate(BaseModel):
    action_id: int
    day: Optional[date] = Field(default=None, description="Defaults to today in the user's timezone.")
    note: Optional[str] = None


class LogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action_id: int
    day: date
    xp_awarded: int
    note: Optional[str]


class LogCreateResponse(BaseModel):
    log: LogEntryResponse
    xp_awarded: int
    coin_bonus: int
    streak: int
    level: int


class LogDeleteResponse(BaseModel):
    xp_reversed: int
