"""
Profile router.

GET    /profile           — Progression summary (level, avatar, counts)
PATCH  /profile           — Update name / nickname / timezone / locale
DELETE /profile/progress  — Wipe history and progression
DELETE /profile/actions   — Delete all actions and their log entries
GET    /profile/export    — CSV export
POST   /profile/checkin   — Upsert a daily check-in
GET    /profile/checkins  — Check-ins for the last N days
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.users import (
    CheckinRequest,
    CheckinResponse,
    ExportResponse,
    ProfileResponse,
    ProfileUpdate,
    UserResponse,
)
from liferpg.services.actions import clear_actions
from liferpg.services.checkins import list_checkins, upsert_checkin
from liferpg.services.users import (
    export_csv,
    get_profile,
    reset_progress,
    today_for,
    update_profile,
)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse, summary="Get the player's profile")
def read_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Level is derived from `total_xp` on every read; `avatar_stage` mirrors it,
    capped at 25.
    """
    return get_profile(db, user)


@router.patch(
    "",
    response_model=UserResponse,
    summary="Update profile fields",
    responses={422: {"model": ErrorResponse, "description": "Unknown timezone."}},
)
def patch_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return update_profile(db, user, payload.model_dump(exclude_unset=True))


@router.delete(
    "/progress",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset all progress",
)
def delete_progress(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Deletes logs, habits, kanban tasks, energy and check-ins. Actions and rewards stay."""
    reset_progress(db, user)


@router.delete(
    "/actions",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete every action",
)
def delete_actions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    clear_actions(db, user)


@router.get("/export", response_model=ExportResponse, summary="Export history as CSV")
def export(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return export_csv(db, user)


@router.post(
    "/checkin",
    response_model=CheckinResponse,
    summary="Create or overwrite a daily check-in",
)
def checkin(
    payload: CheckinRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    day = payload.day or today_for(user)
    return upsert_checkin(db, user, day, payload.model_dump(exclude={"day"}))


@router.get(
    "/checkins",
    response_model=list[CheckinResponse],
    summary="List recent check-ins",
)
def checkins(
    range_days: int = Query(default=90, ge=1, le=366, alias="range", description="Days back from today."),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return list_checkins(db, user, today_for(user), range_days=range_days)
