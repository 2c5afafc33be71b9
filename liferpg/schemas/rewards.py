from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RewardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    coin_cost: int = Field(gt=0)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=16)


class RewardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]
    coin_cost: int
    is_redeemed: bool
    redeemed_at: Optional[datetime]


class RedeemResponse(BaseModel):
    reward: RewardResponse
    total_coins: int
