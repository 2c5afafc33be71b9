"""
Daily activity streak and the coin bonuses attached to it.

The streak moves only on the first qualifying action of a new local day:
  last active yesterday        → streak + 1
  last active earlier / never  → streak = 1
  already active today         → nothing changes, no bonus
A bonus is paid when the resulting streak equals a threshold exactly.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from liferpg.core.errors import InvalidInputError

STREAK_BONUSES: tuple[tuple[int, int], ...] = (
    (3, 10),
    (7, 30),
    (14, 75),
    (30, 200),
    (100, 500),
    (365, 2000),
)


@dataclass(frozen=True)
class StreakUpdate:
    streak: int
    coin_bonus: int
    is_new_day: bool


def streak_bonus(streak_days: int) -> Optional[int]:
    if isinstance(streak_days, bool) or not isinstance(streak_days, int) or streak_days < 1:
        raise InvalidInputError("streak_days must be a positive integer.", field="streak_days")
    for days, coins in STREAK_BONUSES:
        if days == streak_days:
            return coins
    return None


def advance_streak(
    last_active_day: Optional[date],
    today: date,
    current_streak: int,
) -> StreakUpdate:
    if last_active_day is not None and last_active_day >= today:
        return StreakUpdate(streak=current_streak, coin_bonus=0, is_new_day=False)

    if last_active_day == today - timedelta(days=1):
        streak = current_streak + 1
    else:
        streak = 1
    return StreakUpdate(streak=streak, coin_bonus=streak_bonus(streak) or 0, is_new_day=True)
