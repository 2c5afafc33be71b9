"""
Weekly balance router.

GET /weekly — Per-block XP for a Monday-started week against its cap
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.weekly import WeeklyResponse
from liferpg.services.timezone import week_start as monday_of
from liferpg.services.users import today_for
from liferpg.services.weekly import weekly_report

router = APIRouter(prefix="/weekly", tags=["weekly"])


@router.get(
    "",
    response_model=WeeklyResponse,
    summary="Weekly life balance",
    responses={422: {"model": ErrorResponse, "description": "week_start is not a Monday."}},
)
def read_weekly(
    week_start: Optional[date] = Query(
        default=None,
        description="Monday of the week. Defaults to the current week in the user's timezone.",
    ),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Block XP counts action log entries and kanban tasks completed in the
    week (tasks without a block are left out). `percentage` is capped at
    100; `trend` compares with the week before.
    """
    start = week_start or monday_of(today_for(user))
    return weekly_report(db, user, start)
