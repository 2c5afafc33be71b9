"""
Actions and the action log.

Logging an action is the only thing that moves the daily activity streak:

  1. freeze xp_awarded = action.xp on a new log entry
  2. credit the XP (level / avatar stage follow)
  3. advance the streak; pay the coin bonus on an exact threshold
  4. last_active_date = today

all inside one commit. Deleting a log entry reverses exactly its
xp_awarded; streaks and coins are left alone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from liferpg.core.errors import InvalidInputError, NotFoundError
from liferpg.models.action import Action, Block, Difficulty, LogEntry
from liferpg.models.user import User
from liferpg.services.coins import advance_streak
from liferpg.services.users import credit_xp

logger = logging.getLogger("liferpg.actions")

ACTION_FIELDS = ("name", "block", "xp", "difficulty", "is_active")

# 4 starter actions per block.
DEFAULT_ACTIONS: tuple[tuple[str, Block, int, Difficulty], ...] = (
    ("Cold shower", Block.HEALTH, 12, Difficulty.NORMAL),
    ("Take vitamins", Block.HEALTH, 3, Difficulty.EASY),
    ("Yoga session", Block.HEALTH, 15, Difficulty.NORMAL),
    ("Track calories", Block.HEALTH, 5, Difficulty.EASY),
    ("Plan tomorrow", Block.WORK, 5, Difficulty.EASY),
    ("Review tasks", Block.WORK, 5, Difficulty.EASY),
    ("Learn a work tool", Block.WORK, 15, Difficulty.NORMAL),
    ("Networking", Block.WORK, 10, Difficulty.NORMAL),
    ("Watch a TED talk", Block.DEVELOPMENT, 8, Difficulty.EASY),
    ("Solve a puzzle", Block.DEVELOPMENT, 8, Difficulty.EASY),
    ("Write study notes", Block.DEVELOPMENT, 10, Difficulty.EASY),
    ("Listen to a podcast", Block.DEVELOPMENT, 8, Difficulty.EASY),
    ("Text someone you care about", Block.RELATIONSHIPS, 5, Difficulty.EASY),
    ("Give a compliment", Block.RELATIONSHIPS, 5, Difficulty.EASY),
    ("Quality time with family", Block.RELATIONSHIPS, 15, Difficulty.NORMAL),
    ("Forgive and let go", Block.RELATIONSHIPS, 20, Difficulty.HARD),
    ("Track expenses", Block.FINANCE, 5, Difficulty.EASY),
    ("No-spend day", Block.FINANCE, 10, Difficulty.NORMAL),
    ("Financial planning", Block.FINANCE, 20, Difficulty.HARD),
    ("Compare prices", Block.FINANCE, 5, Difficulty.EASY),
    ("Digital detox (1 hour)", Block.SPIRITUALITY, 10, Difficulty.NORMAL),
    ("Prayer", Block.SPIRITUALITY, 5, Difficulty.EASY),
    ("Affirmations", Block.SPIRITUALITY, 5, Difficulty.EASY),
    ("Read a spiritual book", Block.SPIRITUALITY, 10, Difficulty.NORMAL),
    ("Visit a new place", Block.BRIGHTNESS, 15, Difficulty.NORMAL),
    ("Take photos", Block.BRIGHTNESS, 8, Difficulty.EASY),
    ("Play a game", Block.BRIGHTNESS, 8, Difficulty.EASY),
    ("Try a new recipe", Block.BRIGHTNESS, 12, Difficulty.NORMAL),
    ("Water the plants", Block.HOME, 3, Difficulty.EASY),
    ("Declutter desk", Block.HOME, 5, Difficulty.EASY),
    ("Fix something at home", Block.HOME, 15, Difficulty.NORMAL),
    ("Grocery shopping", Block.HOME, 10, Difficulty.NORMAL),
)


@dataclass
class LogResult:
    log: LogEntry
    xp_awarded: int
    coin_bonus: int
    streak: int
    level: int


# ---------------------------------------------------------------------------
# Actions CRUD
# ---------------------------------------------------------------------------

def get_action(db: Session, user: User, action_id: int) -> Action:
    action = (
        db.query(Action)
        .filter(Action.id == action_id, Action.user_id == user.id)
        .first()
    )
    if action is None:
        raise NotFoundError("Action", action_id)
    return action


def list_actions(db: Session, user: User) -> list[Action]:
    return (
        db.query(Action)
        .filter(Action.user_id == user.id)
        .order_by(Action.id.desc())
        .all()
    )


def create_action(
    db: Session,
    user: User,
    name: str,
    block: str,
    xp: int,
    difficulty: Optional[str] = None,
) -> Action:
    if xp <= 0:
        raise InvalidInputError("xp must be positive.", field="xp")
    action = Action(
        user_id=user.id,
        name=name,
        block=block,
        xp=xp,
        difficulty=difficulty or Difficulty.EASY,
        is_active=True,
    )
    db.add(action)
    db.commit()
    db.refresh(action)
    return action


def update_action(db: Session, user: User, action_id: int, changes: dict[str, Any]) -> Action:
    action = get_action(db, user, action_id)
    if "xp" in changes and changes["xp"] is not None and changes["xp"] <= 0:
        raise InvalidInputError("xp must be positive.", field="xp")
    for key in ACTION_FIELDS:
        if key in changes and changes[key] is not None:
            setattr(action, key, changes[key])
    db.commit()
    db.refresh(action)
    return action


def delete_action(db: Session, user: User, action_id: int) -> None:
    action = get_action(db, user, action_id)
    db.query(LogEntry).filter(LogEntry.action_id == action.id).delete(synchronize_session=False)
    db.delete(action)
    db.commit()


def clear_actions(db: Session, user: User) -> None:
    """Delete every action together with its log entries."""
    db.query(LogEntry).filter(LogEntry.user_id == user.id).delete(synchronize_session=False)
    db.query(Action).filter(Action.user_id == user.id).delete(synchronize_session=False)
    db.commit()


def seed_default_actions(db: Session, user: User, commit: bool = True) -> int:
    """Create the starter actions the user does not have yet (by name, case-insensitive)."""
    existing = {
        name.lower()
        for (name,) in db.query(Action.name).filter(Action.user_id == user.id).all()
    }
    created = 0
    for name, block, xp, difficulty in DEFAULT_ACTIONS:
        if name.lower() in existing:
            continue
        db.add(Action(user_id=user.id, name=name, block=block, xp=xp, difficulty=difficulty, is_active=True))
        created += 1
    if commit:
        db.commit()
    return created


# ---------------------------------------------------------------------------
# Action log
# ---------------------------------------------------------------------------

def log_action(
    db: Session,
    user: User,
    action_id: int,
    today: date,
    day: Optional[date] = None,
    note: Optional[str] = None,
) -> LogResult:
    action = get_action(db, user, action_id)
    locked = db.query(User).filter(User.id == user.id).with_for_update().one()

    entry = LogEntry(
        user_id=locked.id,
        action_id=action.id,
        day=day or today,
        xp_awarded=action.xp,
        note=note,
    )
    db.add(entry)

    info = credit_xp(locked, action.xp)

    update = advance_streak(locked.last_active_date, today, locked.current_streak)
    if update.is_new_day:
        locked.current_streak = update.streak
        locked.longest_streak = max(locked.longest_streak, update.streak)
        locked.total_coins += update.coin_bonus
        locked.last_active_date = today
        if update.coin_bonus:
            logger.info(
                "streak bonus paid",
                extra={"user_id": locked.id, "streak": update.streak, "coins": update.coin_bonus},
            )

    db.commit()
    db.refresh(entry)
    return LogResult(
        log=entry,
        xp_awarded=action.xp,
        coin_bonus=update.coin_bonus,
        streak=locked.current_streak,
        level=info.level,
    )


def list_logs(
    db: Session,
    user: User,
    day: Optional[date] = None,
    week_start: Optional[date] = None,
) -> list[LogEntry]:
    q = db.query(LogEntry).filter(LogEntry.user_id == user.id)
    if day is not None:
        q = q.filter(LogEntry.day == day)
    elif week_start is not None:
        q = q.filter(LogEntry.day >= week_start, LogEntry.day < week_start + timedelta(days=7))
    return q.order_by(LogEntry.id.desc()).all()


def delete_log(db: Session, user: User, log_id: int) -> int:
    """Remove a log entry and take back the XP it paid. Returns that XP."""
    entry = (
        db.query(LogEntry)
        .filter(LogEntry.id == log_id, LogEntry.user_id == user.id)
        .first()
    )
    if entry is None:
        raise NotFoundError("LogEntry", log_id)

    locked = db.query(User).filter(User.id == user.id).with_for_update().one()
    reversed_xp = entry.xp_awarded
    db.delete(entry)
    credit_xp(locked, -reversed_xp)
    db.commit()
    return reversed_xp
