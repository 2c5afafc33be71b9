"""
Habit Level Curve.

A habit levels up with its lifetime completion count:

  L1 Beginner    0–6
  L2 Apprentice  7–20
  L3 Regular     21–49
  L4 Committed   50–99
  L5 Dedicated   100–199
  L6 Master      200–364
  L7 Legend      365+      (open-ended)

Each completed log pays xp_per_log * (1 + level * 0.1), where `level` is
the level reached *after* counting that log.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from liferpg.core.errors import InvalidInputError
from liferpg.services.progression import round_half_up


@dataclass(frozen=True)
class _Band:
    level: int
    title: str
    min: int
    max: Optional[int]   # None → open-ended


HABIT_BANDS: tuple[_Band, ...] = (
    _Band(1, "Beginner", 0, 6),
    _Band(2, "Apprentice", 7, 20),
    _Band(3, "Regular", 21, 49),
    _Band(4, "Committed", 50, 99),
    _Band(5, "Dedicated", 100, 199),
    _Band(6, "Master", 200, 364),
    _Band(7, "Legend", 365, None),
)


@dataclass(frozen=True)
class HabitLevelInfo:
    level: int
    title: str
    min_completions: int
    max_completions: Optional[int]
    progress: float
    xp_multiplier: Decimal


def _multiplier(level: int) -> Decimal:
    return Decimal(1) + Decimal(level) / Decimal(10)


def habit_level(total_completions: int) -> HabitLevelInfo:
    if isinstance(total_completions, bool) or not isinstance(total_completions, int):
        raise InvalidInputError("total_completions must be an integer.", field="total_completions")
    if total_completions < 0:
        raise InvalidInputError("total_completions must not be negative.", field="total_completions")

    for band in HABIT_BANDS:
        if band.max is None:
            progress = 1.0
        elif total_completions <= band.max:
            progress = (total_completions - band.min) / (band.max - band.min + 1)
        else:
            continue
        return HabitLevelInfo(
            level=band.level,
            title=band.title,
            min_completions=band.min,
            max_completions=band.max,
            progress=min(progress, 1.0),
            xp_multiplier=_multiplier(band.level),
        )
    raise AssertionError("open-ended top band always matches")


def habit_xp_award(xp_per_log: int, total_logs_after: int) -> int:
    """XP for the log that brought the habit to `total_logs_after` completions."""
    info = habit_level(total_logs_after)
    return round_half_up(Decimal(xp_per_log) * info.xp_multiplier)


def streak_lengths(days: Iterable[date]) -> tuple[int, int]:
    """
    (current, longest) consecutive-day runs over a set of logged days.
    `current` is the run that ends on the most recent logged day.
    """
    ordered = sorted(set(days))
    if not ordered:
        return 0, 0

    longest = run = 1
    for prev, cur in zip(ordered, ordered[1:]):
        if cur - prev == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
    return run, longest
