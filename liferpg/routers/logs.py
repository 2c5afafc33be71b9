"""
Action log router.

GET    /logs        — Log entries for a day or a Monday-started week
POST   /logs        — Log an action (XP, streak, coin bonus)
DELETE /logs/{id}   — Remove an entry and reverse its XP
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from liferpg.core.errors import InvalidInputError
from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.actions import LogCreate, LogCreateResponse, LogDeleteResponse, LogEntryResponse
from liferpg.services.actions import delete_log, list_logs, log_action
from liferpg.services.users import today_for

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=list[LogEntryResponse], summary="List log entries")
def read_logs(
    day: Optional[date] = Query(default=None, description="Single day. Defaults to today."),
    week_start: Optional[date] = Query(default=None, description="Monday of a week; overrides `day`."),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if week_start is not None:
        if week_start.weekday() != 0:
            raise InvalidInputError("week_start must be a Monday.", field="week_start")
        return list_logs(db, user, week_start=week_start)
    return list_logs(db, user, day=day or today_for(user))


@router.post(
    "",
    response_model=LogCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an action",
    responses={404: {"model": ErrorResponse, "description": "Action not found."}},
)
def create_log(
    payload: LogCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Credits the action's XP (frozen on the entry) and advances the daily
    streak. The first log of a day that lands exactly on a streak milestone
    pays its coin bonus.
    """
    result = log_action(db, user, payload.action_id, today=today_for(user), day=payload.day, note=payload.note)
    return LogCreateResponse(
        log=LogEntryResponse.model_validate(result.log),
        xp_awarded=result.xp_awarded,
        coin_bonus=result.coin_bonus,
        streak=result.streak,
        level=result.level,
    )


@router.delete(
    "/{log_id}",
    response_model=LogDeleteResponse,
    summary="Delete a log entry",
    responses={404: {"model": ErrorResponse, "description": "Log entry not found."}},
)
def remove_log(log_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return LogDeleteResponse(xp_reversed=delete_log(db, user, log_id))
