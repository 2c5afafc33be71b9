"""
Energy economy: daily energy points (EP).

Model
-----
A day starts at 100 EP. Everything that happens to it is an event:

  morning  — sleep / physical / mental scores (0–100 each) produce
             base = round(sleep*0.4 + physical*0.3 + mental*0.3), halved when
             burnout is active, plus a streak bonus of up to +15.
             current = base + bonus + recovered - spent (earlier spend and
             recovery survive a morning re-submit).
  spend    — deduct a cost; 1.5x when the balance is already negative;
             never below MIN_ENERGY (-20). Only the EP actually deducted
             counts towards spent_total.
  recover  — add a catalog amount, capped at MAX_ENERGY (100) and by a
             per-type daily quota. Only the EP actually restored counts
             towards recovered_total.

`EnergyDay` is an immutable record; `replay()` folds the ordered events of a
day into one, so the stored balance is always reproducible from history.

Burnout
-------
Looking at the days strictly before today, newest first: three or more
consecutive days that ended below zero put today in burnout. It is decided
once, when today's log is created, and then stored.

Everything in this module is pure: no DB, no clock.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from functools import reduce
from typing import Iterable, Optional, Sequence

from liferpg.core.errors import InvalidInputError, RecoveryLimitReachedError
from liferpg.services.progression import round_half_up, validate_rating

MAX_ENERGY = 100
MIN_ENERGY = -20
DEFAULT_ENERGY = 100

BURNOUT_THRESHOLD_DAYS = 3
BURNOUT_PENALTY = Decimal("0.5")
OVERDRAFT_MULTIPLIER = Decimal("1.5")

SCORE_MAX = 100
SLEEP_WEIGHT = Decimal("0.4")
PHYSICAL_WEIGHT = Decimal("0.3")
MENTAL_WEIGHT = Decimal("0.3")

GOOD_SLEEP_SCORE = 75
SLEEP_STREAK_DAYS = 5
SLEEP_STREAK_BONUS = 5
ROUTINE_STREAK_DAYS = 3
ROUTINE_STREAK_BONUS = 10

# How many prior days are inspected for burnout and morning streaks.
RECENT_WINDOW = 5

ENERGY_COSTS: dict[str, int] = {
    "EASY": 5,
    "NORMAL": 10,
    "HARD": 20,
    "VERY_HARD": 35,
    "LEGENDARY": 60,
}


@dataclass(frozen=True)
class RecoveryType:
    type: str
    label: str
    ep: int
    max_per_day: Optional[int]   # None → unlimited
    icon: str


RECOVERY_TYPES: tuple[RecoveryType, ...] = (
    RecoveryType("POWER_NAP", "Power Nap", 12, 1, "😴"),
    RecoveryType("TEA_BREAK", "Tea Break", 5, 3, "☕"),
    RecoveryType("PRAYER", "Prayer", 8, 5, "🤲"),
    RecoveryType("MUSIC", "Music", 3, None, "🎵"),
    RecoveryType("WALK", "Walk", 10, 2, "🚶"),
    RecoveryType("QUEST_COMPLETE", "Quest Complete", 5, None, "⚔️"),
)
_RECOVERY_BY_TYPE = {r.type: r for r in RECOVERY_TYPES}


class EventKind:
    MORNING = "morning"
    SPEND = "spend"
    RECOVER = "recover"


# ---------------------------------------------------------------------------
# Input validation / lookups
# ---------------------------------------------------------------------------

def _require_score(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= SCORE_MAX:
        raise InvalidInputError(f"{name} must be an integer between 0 and {SCORE_MAX}.", field=name)
    return value


def _require_positive(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInputError(f"{name} must be a positive integer.", field=name)
    return value


def get_recovery_type(recovery_type: Optional[str]) -> RecoveryType:
    definition = _RECOVERY_BY_TYPE.get(recovery_type or "")
    if definition is None:
        raise InvalidInputError(f"Unknown recovery type {recovery_type!r}.", field="type")
    return definition


# ---------------------------------------------------------------------------
# Costs and morning inputs
# ---------------------------------------------------------------------------

def calc_base_energy(sleep: int, physical: int, mental: int) -> int:
    sleep = _require_score(sleep, "sleep_score")
    physical = _require_score(physical, "physical_score")
    mental = _require_score(mental, "mental_score")
    return round_half_up(sleep * SLEEP_WEIGHT + physical * PHYSICAL_WEIGHT + mental * MENTAL_WEIGHT)


def apply_burnout_penalty(base_energy: int, is_burnout: bool) -> int:
    if not is_burnout:
        return base_energy
    return round_half_up(base_energy * BURNOUT_PENALTY)


def difficulty_cost(difficulty: str) -> int:
    key = getattr(difficulty, "value", difficulty)
    if key not in ENERGY_COSTS:
        raise InvalidInputError(f"Unknown difficulty {difficulty!r}.", field="difficulty")
    return ENERGY_COSTS[key]


def kanban_energy_cost(importance: int, discomfort: int, urgency: int) -> int:
    total = (
        validate_rating(importance, "importance")
        + validate_rating(discomfort, "discomfort")
        + validate_rating(urgency, "urgency")
    )
    average = Decimal(total) / 3
    if average <= 3:
        return 5
    if average <= 5:
        return 10
    if average <= 7:
        return 20
    return 35


# ---------------------------------------------------------------------------
# History-derived flags (prior days, newest first)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PriorDay:
    """What the economy needs to know about an earlier day."""
    current_energy: int
    sleep_score: int = 0
    morning_done: bool = False


def _trailing(prior: Sequence[PriorDay], predicate) -> int:
    count = 0
    for day in prior:
        if not predicate(day):
            break
        count += 1
    return count


def detect_burnout(prior: Sequence[PriorDay]) -> bool:
    overdraft_run = _trailing(prior, lambda d: d.current_energy < 0)
    return overdraft_run >= BURNOUT_THRESHOLD_DAYS


def morning_streak_bonus(prior: Sequence[PriorDay]) -> int:
    bonus = 0
    if _trailing(prior, lambda d: d.sleep_score >= GOOD_SLEEP_SCORE) >= SLEEP_STREAK_DAYS:
        bonus += SLEEP_STREAK_BONUS
    if _trailing(prior, lambda d: d.morning_done) >= ROUTINE_STREAK_DAYS:
        bonus += ROUTINE_STREAK_BONUS
    return bonus


# ---------------------------------------------------------------------------
# Day record and transitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnergyDay:
    base_energy: int = DEFAULT_ENERGY
    streak_bonus: int = 0
    current_energy: int = DEFAULT_ENERGY
    spent_total: int = 0
    recovered_total: int = 0
    morning_done: bool = False
    recoveries: tuple[tuple[str, int], ...] = field(default=())   # (type, EP restored)

    @property
    def is_overdraft(self) -> bool:
        return self.current_energy < 0

    def recovery_count(self, recovery_type: str) -> int:
        return sum(1 for kind, _ in self.recoveries if kind == recovery_type)


def apply_morning(day: EnergyDay, base_energy: int, streak_bonus: int) -> EnergyDay:
    """`base_energy` already carries the burnout penalty, if any."""
    return replace(
        day,
        base_energy=base_energy,
        streak_bonus=streak_bonus,
        current_energy=base_energy + streak_bonus + day.recovered_total - day.spent_total,
        morning_done=True,
    )


def apply_spend(day: EnergyDay, amount: int) -> tuple[EnergyDay, int]:
    """Returns the new day and the EP actually deducted."""
    amount = _require_positive(amount, "amount")
    effective = round_half_up(amount * OVERDRAFT_MULTIPLIER) if day.is_overdraft else amount
    new_energy = max(day.current_energy - effective, MIN_ENERGY)
    spent = max(day.current_energy - new_energy, 0)
    new_energy = day.current_energy - spent
    return (
        replace(day, current_energy=new_energy, spent_total=day.spent_total + spent),
        spent,
    )


def apply_recovery(day: EnergyDay, recovery_type: str) -> tuple[EnergyDay, int]:
    """Returns the new day and the EP actually restored."""
    definition = get_recovery_type(recovery_type)
    if definition.max_per_day is not None and day.recovery_count(definition.type) >= definition.max_per_day:
        raise RecoveryLimitReachedError(definition.type, definition.max_per_day)

    restored = max(min(definition.ep, MAX_ENERGY - day.current_energy), 0)
    return (
        replace(
            day,
            current_energy=day.current_energy + restored,
            recovered_total=day.recovered_total + restored,
            recoveries=day.recoveries + ((definition.type, restored),),
        ),
        restored,
    )


# ---------------------------------------------------------------------------
# Fold
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnergyEventRecord:
    kind: str
    amount: int = 0
    bonus: int = 0
    recovery_type: Optional[str] = None

    def apply(self, day: EnergyDay) -> tuple[EnergyDay, int]:
        if self.kind == EventKind.MORNING:
            return apply_morning(day, self.amount, self.bonus), 0
        if self.kind == EventKind.SPEND:
            return apply_spend(day, self.amount)
        if self.kind == EventKind.RECOVER:
            return apply_recovery(day, self.recovery_type)
        raise InvalidInputError(f"Unknown energy event kind {self.kind!r}.", field="kind")


def replay(events: Iterable[EnergyEventRecord], start: Optional[EnergyDay] = None) -> EnergyDay:
    return reduce(lambda day, ev: ev.apply(day)[0], events, start or EnergyDay())


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

def energy_status(current: int, base: int) -> str:
    if current <= 0:
        return "overdraft"
    pct = current / max(base, 1) * 100
    if pct >= 70:
        return "great"
    if pct >= 40:
        return "normal"
    if pct >= 20:
        return "low"
    return "critical"
