"""
Actions router.

GET    /actions               — List the player's actions
POST   /actions               — Create an action
PATCH  /actions/{id}          — Update an action
DELETE /actions/{id}          — Delete an action and its log entries
POST   /actions/seed-defaults — Add the starter actions that are missing
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.actions import ActionCreate, ActionResponse, ActionUpdate, SeedResponse
from liferpg.services import actions as svc

router = APIRouter(prefix="/actions", tags=["actions"])


@router.get("", response_model=list[ActionResponse], summary="List actions")
def list_actions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return svc.list_actions(db, user)


@router.post(
    "",
    response_model=ActionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an action",
)
def create_action(
    payload: ActionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return svc.create_action(
        db, user, name=payload.name, block=payload.block, xp=payload.xp, difficulty=payload.difficulty,
    )


@router.patch(
    "/{action_id}",
    response_model=ActionResponse,
    summary="Update an action",
    responses={404: {"model": ErrorResponse, "description": "Action not found."}},
)
def update_action(
    action_id: int,
    payload: ActionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Past log entries keep the XP they were logged with."""
    return svc.update_action(db, user, action_id, payload.model_dump(exclude_unset=True))


@router.delete(
    "/{action_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an action",
    responses={404: {"model": ErrorResponse, "description": "Action not found."}},
)
def delete_action(action_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    svc.delete_action(db, user, action_id)


@router.post("/seed-defaults", response_model=SeedResponse, summary="Seed starter actions")
def seed_defaults(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Idempotent: actions whose name already exists (case-insensitive) are skipped."""
    return SeedResponse(created=svc.seed_default_actions(db, user))
