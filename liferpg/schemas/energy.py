"""
Energy request / response schemas.

GET  /energy             →                  → EnergyResponse
POST /energy             → MorningRequest   → EnergyResponse
POST /energy/spend       → SpendRequest     → EnergyChangeResponse
POST /energy/recover     → RecoverRequest   → EnergyChangeResponse
GET  /energy/history     →                  → EnergyHistoryResponse
GET  /energy/recoveries  →                  → list[RecoveryOptionResponse]
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from liferpg.models.action import Difficulty


class MorningRequest(BaseModel):
    sleep_score: int = Field(ge=0, le=100)
    physical_score: int = Field(ge=0, le=100)
    mental_score: int = Field(ge=0, le=100)


class SpendRequest(BaseModel):
    """Exactly one way of sizing the cost is used: amount, then difficulty, then ratings."""
    amount: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[Difficulty] = None
    importance: Optional[int] = Field(default=None, ge=1, le=10)
    discomfort: Optional[int] = Field(default=None, ge=1, le=10)
    urgency: Optional[int] = Field(default=None, ge=1, le=10)


class RecoverRequest(BaseModel):
    type: str = Field(examples=["TEA_BREAK"])


class EnergyRecoveryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recovery_type: str
    applied: int


class EnergyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    sleep_score: int
    physical_score: int
    mental_score: int
    base_energy: int
    streak_bonus: int
    current_energy: int
    spent_total: int
    recovered_total: int
    is_burnout: bool
    morning_done: bool
    status: str
    recoveries: list[EnergyRecoveryResponse]


class EnergyChangeResponse(BaseModel):
    energy: EnergyResponse
    applied: int = Field(description="EP actually deducted or restored.")


class EnergyHistoryStats(BaseModel):
    total_days: int
    avg_energy: int
    overdraft_days: int
    burnout_days: int
    avg_sleep: int
    avg_physical: int
    avg_mental: int


class EnergyHistoryDay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    base_energy: int
    current_energy: int
    spent_total: int
    recovered_total: int
    is_burnout: bool
    morning_done: bool


class EnergyHistoryResponse(BaseModel):
    logs: list[EnergyHistoryDay]
    stats: EnergyHistoryStats


class RecoveryOptionResponse(BaseModel):
    type: str
    label: str
    ep: int
    max_per_day: Optional[int]
    icon: str
    used_today: int
    remaining: Optional[int] = Field(description="null when the type is unlimited.")
