from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class BlockBalanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    block: str
    xp: int
    cap: int
    percentage: int = Field(ge=0, le=100)
    trend: str = Field(description='"up", "down" or "same" against the previous week.')


class WeeklyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    week_start: date
    blocks: list[BlockBalanceResponse]
    total_xp: int
