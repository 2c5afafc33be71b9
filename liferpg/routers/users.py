"""
Users router.

POST /users — Create a player (no X-User-Id required)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from liferpg.core.config import settings
from liferpg.db.base import get_db
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.users import UserCreate, UserResponse
from liferpg.services.users import create_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    responses={
        201: {"description": "User created."},
        422: {"model": ErrorResponse, "description": "Validation error or unknown timezone."},
    },
)
def create(payload: UserCreate, db: Session = Depends(get_db)):
    """
    Create a player at level 1 with zero XP, coins and streak.

    The returned `id` is what clients send back in the `X-User-Id` header.
    Starter actions (4 per block) are created when `seed_actions` is true,
    or when it is omitted and `SEED_DEFAULT_ACTIONS` is enabled.
    """
    seed = settings.SEED_DEFAULT_ACTIONS if payload.seed_actions is None else payload.seed_actions
    return create_user(
        db,
        name=payload.name,
        nickname=payload.nickname,
        timezone=payload.timezone,
        locale=payload.locale,
        seed_actions=seed,
    )
