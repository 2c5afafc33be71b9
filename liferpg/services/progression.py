"""
Progression calculators: Level Curve and Kanban scoring.

Level Curve
-----------
Level L costs BASE_XP * L experience. Starting at level 1 the running total
is walked upwards until the remaining XP no longer covers the current
level's cost, or MAX_LEVEL is reached.

  level 1 →  550 XP to reach level 2
  level 2 → 1100 XP to reach level 3
  ...
  165 000 XP in total reaches MAX_LEVEL (25), which is terminal.

Kanban scoring
--------------
A finished task is worth round(importance * discomfort * urgency / 10) XP,
each rating in [1, 10]. Halves round up (5·5·5 → 12.5 → 13).

Everything in this module is pure: no DB, no clock.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from liferpg.core.errors import InvalidInputError

BASE_XP = 550
MAX_LEVEL = 25

RATING_MIN = 1
RATING_MAX = 10

AVATAR_TITLES: dict[int, str] = {
    1: "Seedling",
    2: "Sprout",
    3: "Sapling",
    4: "Young Tree",
    5: "Tree",
    6: "Warrior",
    7: "Knight",
    8: "Guardian",
    9: "Champion",
    10: "Hero",
    11: "Sage",
    12: "Mystic",
    13: "Archon",
    14: "Legend",
    15: "Titan",
    16: "Cosmic",
    17: "Astral",
    18: "Nebula",
    19: "Galaxy",
    20: "Universe",
    21: "Transcendent",
    22: "Eternal",
    23: "Infinite",
    24: "Omega",
    25: "Apex",
}


@dataclass(frozen=True)
class LevelInfo:
    level: int
    current_xp: int      # XP earned inside the current level
    next_level_xp: int   # cost of the current level; 0 at MAX_LEVEL
    progress: float      # current_xp / next_level_xp; 1.0 at MAX_LEVEL


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _require_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field} must be an integer, got {value!r}.", field=field)
    return value


def level_of(total_xp: int) -> LevelInfo:
    total_xp = _require_int(total_xp, "total_xp")
    if total_xp < 0:
        raise InvalidInputError("total_xp must not be negative.", field="total_xp")

    level = 1
    accumulated = 0
    while level < MAX_LEVEL:
        needed = BASE_XP * level
        if accumulated + needed > total_xp:
            current = total_xp - accumulated
            return LevelInfo(
                level=level,
                current_xp=current,
                next_level_xp=needed,
                progress=current / needed,
            )
        accumulated += needed
        level += 1

    return LevelInfo(level=MAX_LEVEL, current_xp=0, next_level_xp=0, progress=1.0)


def avatar_stage(level: int) -> int:
    return min(level, MAX_LEVEL)


def avatar_title(level: int) -> str:
    return AVATAR_TITLES[avatar_stage(max(level, 1))]


def validate_rating(value, field: str) -> int:
    value = _require_int(value, field)
    if not RATING_MIN <= value <= RATING_MAX:
        raise InvalidInputError(
            f"{field} must be between {RATING_MIN} and {RATING_MAX}, got {value}.",
            field=field,
        )
    return value


def kanban_xp(importance: int, discomfort: int, urgency: int) -> int:
    importance = validate_rating(importance, "importance")
    discomfort = validate_rating(discomfort, "discomfort")
    urgency = validate_rating(urgency, "urgency")
    return round_half_up(Decimal(importance * discomfort * urgency) / 10)
