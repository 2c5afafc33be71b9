"""
Rewards router.

GET    /rewards              — List rewards
POST   /rewards              — Create a reward
DELETE /rewards/{id}         — Delete an unredeemed reward
POST   /rewards/{id}/redeem  — Spend coins on a reward
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.rewards import RedeemResponse, RewardCreate, RewardResponse
from liferpg.services import rewards as svc
from liferpg.services.timezone import utcnow

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=list[RewardResponse], summary="List rewards")
def read_rewards(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return svc.list_rewards(db, user)


@router.post(
    "",
    response_model=RewardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reward",
)
def create(payload: RewardCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return svc.create_reward(
        db, user,
        name=payload.name,
        coin_cost=payload.coin_cost,
        description=payload.description,
        icon=payload.icon,
    )


@router.delete(
    "/{reward_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a reward",
    responses={
        404: {"model": ErrorResponse, "description": "Reward not found."},
        422: {"model": ErrorResponse, "description": "Reward already redeemed."},
    },
)
def delete(reward_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    svc.delete_reward(db, user, reward_id)


@router.post(
    "/{reward_id}/redeem",
    response_model=RedeemResponse,
    summary="Redeem a reward",
    responses={
        404: {"model": ErrorResponse, "description": "Reward not found."},
        409: {"model": ErrorResponse, "description": "Not enough coins."},
    },
)
def redeem(reward_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    reward = svc.redeem_reward(db, user, reward_id, now=utcnow())
    db.refresh(user)
    return RedeemResponse(reward=RewardResponse.model_validate(reward), total_coins=user.total_coins)
