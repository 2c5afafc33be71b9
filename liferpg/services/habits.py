"""
Habits service.

Logging a day
-------------
  - insert the habit log
  - total_logs := count of the habit's logs (including the new one)
  - level      := habit_level(total_logs).level
  - streaks    := streak_lengths(all logged days)
  - award round(xp_per_log * multiplier_after_increment), store it on the log
All in one commit. Logging a day that is already logged changes nothing.

Un-logging a day
----------------
Deletes the log, takes back exactly the XP stored on it, and recomputes
total_logs / level / streaks from what is left.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from liferpg.core.errors import InvalidInputError, NotFoundError
from liferpg.models.habit import Habit, HabitFrequency, HabitLog
from liferpg.models.user import User
from liferpg.services.habit_levels import habit_level, habit_xp_award, streak_lengths
from liferpg.services.users import credit_xp

logger = logging.getLogger("liferpg.habits")


@dataclass
class HabitLogResult:
    log: Optional[HabitLog]
    created: bool
    removed: bool = False
    xp_awarded: int = 0
    xp_reversed: int = 0
    level: int = 1
    level_title: str = "Beginner"


def get_habit(db: Session, user: User, habit_id: int, for_update: bool = False) -> Habit:
    q = db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user.id)
    if for_update:
        q = q.with_for_update()
    habit = q.first()
    if habit is None:
        raise NotFoundError("Habit", habit_id)
    return habit


def list_habits(db: Session, user: User) -> list[Habit]:
    return (
        db.query(Habit)
        .filter(Habit.user_id == user.id)
        .order_by(Habit.id.desc())
        .all()
    )


def create_habit(
    db: Session,
    user: User,
    name: str,
    block: str,
    frequency: Optional[str] = None,
    custom_days: Optional[list[int]] = None,
    target_per_week: Optional[int] = None,
    xp_per_log: Optional[int] = None,
) -> Habit:
    if xp_per_log is not None and xp_per_log <= 0:
        raise InvalidInputError("xp_per_log must be positive.", field="xp_per_log")
    if custom_days and any(d < 0 or d > 6 for d in custom_days):
        raise InvalidInputError("custom_days must be weekday numbers 0-6.", field="custom_days")

    habit = Habit(
        user_id=user.id,
        name=name,
        block=block,
        frequency=frequency or HabitFrequency.DAILY,
        custom_days=",".join(str(d) for d in sorted(set(custom_days))) if custom_days else None,
        target_per_week=target_per_week,
        xp_per_log=xp_per_log or 10,
        total_logs=0,
        level=1,
        current_streak=0,
        longest_streak=0,
        is_active=True,
    )
    db.add(habit)
    db.commit()
    db.refresh(habit)
    return habit


def _recompute(db: Session, habit: Habit) -> None:
    """Rewrite the derived columns from the habit's logs."""
    db.flush()
    days = [d for (d,) in db.query(HabitLog.day).filter(HabitLog.habit_id == habit.id).all()]
    habit.total_logs = len(days)
    habit.level = habit_level(habit.total_logs).level
    habit.current_streak, habit.longest_streak = streak_lengths(days)


def _existing_log(db: Session, habit: Habit, day: date) -> Optional[HabitLog]:
    return (
        db.query(HabitLog)
        .filter(HabitLog.habit_id == habit.id, HabitLog.day == day)
        .first()
    )


def log_habit(db: Session, user: User, habit_id: int, day: date) -> HabitLogResult:
    habit = get_habit(db, user, habit_id, for_update=True)
    existing = _existing_log(db, habit, day)
    if existing is not None:
        info = habit_level(habit.total_logs)
        return HabitLogResult(log=existing, created=False, level=info.level, level_title=info.title)

    locked = db.query(User).filter(User.id == user.id).with_for_update().one()

    log = HabitLog(habit_id=habit.id, user_id=locked.id, day=day, xp_awarded=0)
    db.add(log)
    _recompute(db, habit)

    xp = habit_xp_award(habit.xp_per_log, habit.total_logs)
    log.xp_awarded = xp
    credit_xp(locked, xp)

    db.commit()
    db.refresh(log)
    info = habit_level(habit.total_logs)
    logger.info(
        "habit logged",
        extra={"habit_id": habit.id, "total_logs": habit.total_logs, "level": info.level, "xp": xp},
    )
    return HabitLogResult(log=log, created=True, xp_awarded=xp, level=info.level, level_title=info.title)


def unlog_habit(db: Session, user: User, habit_id: int, day: date) -> HabitLogResult:
    habit = get_habit(db, user, habit_id, for_update=True)
    existing = _existing_log(db, habit, day)
    if existing is None:
        info = habit_level(habit.total_logs)
        return HabitLogResult(log=None, created=False, removed=True, level=info.level, level_title=info.title)

    locked = db.query(User).filter(User.id == user.id).with_for_update().one()
    reversed_xp = existing.xp_awarded
    db.delete(existing)
    _recompute(db, habit)
    credit_xp(locked, -reversed_xp)

    db.commit()
    info = habit_level(habit.total_logs)
    return HabitLogResult(
        log=None,
        created=False,
        removed=True,
        xp_reversed=reversed_xp,
        level=info.level,
        level_title=info.title,
    )

