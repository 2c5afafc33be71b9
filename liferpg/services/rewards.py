"""
Rewards shop: user-defined treats paid for with streak coins.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from liferpg.core.errors import InsufficientCoinsError, InvalidInputError, NotFoundError
from liferpg.models.reward import Reward
from liferpg.models.user import User

logger = logging.getLogger("liferpg.rewards")


def get_reward(db: Session, user: User, reward_id: int, for_update: bool = False) -> Reward:
    q = db.query(Reward).filter(Reward.id == reward_id, Reward.user_id == user.id)
    if for_update:
        q = q.with_for_update()
    reward = q.first()
    if reward is None:
        raise NotFoundError("Reward", reward_id)
    return reward


def list_rewards(db: Session, user: User) -> list[Reward]:
    return (
        db.query(Reward)
        .filter(Reward.user_id == user.id)
        .order_by(Reward.is_redeemed.asc(), Reward.coin_cost.asc(), Reward.id.asc())
        .all()
    )


def create_reward(
    db: Session,
    user: User,
    name: str,
    coin_cost: int,
    description: Optional[str] = None,
    icon: Optional[str] = None,
) -> Reward:
    if coin_cost <= 0:
        raise InvalidInputError("coin_cost must be positive.", field="coin_cost")
    reward = Reward(
        user_id=user.id,
        name=name,
        description=description,
        icon=icon,
        coin_cost=coin_cost,
        is_redeemed=False,
    )
    db.add(reward)
    db.commit()
    db.refresh(reward)
    return reward


def delete_reward(db: Session, user: User, reward_id: int) -> None:
    """Redeemed rewards are history and stay."""
    reward = get_reward(db, user, reward_id)
    if reward.is_redeemed:
        raise InvalidInputError("Redeemed rewards cannot be deleted.", field="reward_id")
    db.delete(reward)
    db.commit()


def redeem_reward(db: Session, user: User, reward_id: int, now: datetime) -> Reward:
    reward = get_reward(db, user, reward_id, for_update=True)
    if reward.is_redeemed:
        raise InvalidInputError("Reward already redeemed.", field="reward_id")

    locked = db.query(User).filter(User.id == user.id).with_for_update().one()
    if locked.total_coins < reward.coin_cost:
        raise InsufficientCoinsError(required=reward.coin_cost, available=locked.total_coins)

    locked.total_coins -= reward.coin_cost
    reward.is_redeemed = True
    reward.redeemed_at = now
    db.commit()
    db.refresh(reward)
    logger.info(
        "reward redeemed",
        extra={"user_id": locked.id, "reward_id": reward.id, "coins": reward.coin_cost},
    )
    return reward
