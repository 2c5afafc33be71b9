"""
Habits router.

GET  /habits            — List habits with level / streak state and recent logs
POST /habits            — Create a habit
POST /habits/{id}/log   — Log (or, with completed=false, un-log) a day
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.habit import Habit
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.habits import (
    HabitCreate,
    HabitLogItem,
    HabitLogRequest,
    HabitLogResponse,
    HabitResponse,
)
from liferpg.services.habit_levels import habit_level
from liferpg.services.habits import create_habit, list_habits, log_habit, unlog_habit
from liferpg.services.users import today_for

router = APIRouter(prefix="/habits", tags=["habits"])

RECENT_LOGS = 90


def _habit_to_response(habit: Habit) -> HabitResponse:
    info = habit_level(habit.total_logs)
    days = [int(d) for d in habit.custom_days.split(",") if d] if habit.custom_days else []
    return HabitResponse(
        id=habit.id,
        name=habit.name,
        block=habit.block,
        frequency=habit.frequency,
        custom_days=days,
        target_per_week=habit.target_per_week,
        xp_per_log=habit.xp_per_log,
        total_logs=habit.total_logs,
        level=info.level,
        level_title=info.title,
        level_progress=info.progress,
        current_streak=habit.current_streak,
        longest_streak=habit.longest_streak,
        is_active=habit.is_active,
        logs=[HabitLogItem.model_validate(l) for l in habit.logs[:RECENT_LOGS]],
    )


@router.get("", response_model=list[HabitResponse], summary="List habits")
def read_habits(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [_habit_to_response(h) for h in list_habits(db, user)]


@router.post(
    "",
    response_model=HabitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a habit",
)
def create(payload: HabitCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    habit = create_habit(
        db,
        user,
        name=payload.name,
        block=payload.block,
        frequency=payload.frequency,
        custom_days=payload.custom_days,
        target_per_week=payload.target_per_week,
        xp_per_log=payload.xp_per_log,
    )
    return _habit_to_response(habit)


@router.post(
    "/{habit_id}/log",
    response_model=HabitLogResponse,
    summary="Log or un-log a habit day",
    responses={404: {"model": ErrorResponse, "description": "Habit not found."}},
)
def log(
    habit_id: int,
    payload: HabitLogRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Logging awards `round(xp_per_log × multiplier)`, where the multiplier is
    that of the habit level reached *after* this log. Logging an already
    logged day changes nothing. Un-logging reverses exactly the XP that the
    removed log paid.
    """
    day = payload.day or today_for(user)
    if payload.completed:
        result = log_habit(db, user, habit_id, day)
    else:
        result = unlog_habit(db, user, habit_id, day)
    return HabitLogResponse(
        habit_id=habit_id,
        day=day,
        logged=payload.completed,
        created=result.created,
        xp_awarded=result.xp_awarded,
        xp_reversed=result.xp_reversed,
        level=result.level,
        level_title=result.level_title,
    )
