"""
Kanban task schemas. Ratings are 1–10; XP is derived, never written by clients.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from liferpg.models.action import Block
from liferpg.models.kanban import KanbanStatus, TaskOwner

Rating = Annotated[Optional[int], Field(ge=1, le=10)]


class KanbanCreate(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    description: Optional[str] = None
    status: Optional[KanbanStatus] = None
    owner: Optional[TaskOwner] = None
    importance: Rating = None
    discomfort: Rating = None
    urgency: Rating = None
    block: Optional[Block] = None
    delegated_to: Optional[str] = Field(default=None, max_length=128)
    due_date: Optional[date] = None
    position: Optional[int] = None
    is_main_task: bool = False
    main_task_date: Optional[date] = None


class KanbanUpdate(BaseModel):
    """Only the fields present in the request body are applied."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    description: Optional[str] = None
    status: Optional[KanbanStatus] = None
    owner: Optional[TaskOwner] = None
    importance: Rating = None
    discomfort: Rating = None
    urgency: Rating = None
    block: Optional[Block] = None
    delegated_to: Optional[str] = Field(default=None, max_length=128)
    due_date: Optional[date] = None
    position: Optional[int] = None
    is_main_task: Optional[bool] = None
    main_task_date: Optional[date] = None


class KanbanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str]
    status: KanbanStatus
    owner: TaskOwner
    importance: int
    discomfort: int
    urgency: int
    block: Optional[Block]
    delegated_to: Optional[str]
    due_date: Optional[date]
    position: int
    is_main_task: bool
    main_task_date: Optional[date]
    xp_awarded: Optional[int]
    completed_at: Optional[datetime]
    completed_day: Optional[date]


class KanbanUpdateResponse(BaseModel):
    task: KanbanResponse
    xp_awarded: int = Field(description="XP credited by this update (0 unless it completed the task).")
