"""
User / profile service.

Public API
----------
create_user(db, ...)                 → User
get_user(db, user_id)                → User            (NotFoundError)
today_for(user, now)                 → date            (user's local calendar day)
credit_xp(user, delta)               → LevelInfo       (flush-free, caller commits)
get_profile(db, user)                → dict
update_profile(db, user, changes)    → User
reset_progress(db, user)             → None
export_csv(db, user, now=None)       → dict[str, str]
"""
from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from liferpg.core.errors import NotFoundError
from liferpg.models.action import Action, LogEntry
from liferpg.models.checkin import DailyCheckin
from liferpg.models.energy import EnergyLog
from liferpg.models.habit import Habit, HabitLog
from liferpg.models.kanban import KanbanTask
from liferpg.models.user import User
from liferpg.services.progression import LevelInfo, avatar_stage, avatar_title, level_of
from liferpg.services.timezone import local_date, local_date_key, resolve_timezone, utcnow

logger = logging.getLogger("liferpg.users")

PROFILE_FIELDS = ("name", "nickname", "timezone", "locale")


def today_for(user: User, now: Optional[datetime] = None) -> date:
    return local_date(now or utcnow(), user.timezone)


def get_user(db: Session, user_id: int, for_update: bool = False) -> User:
    q = db.query(User).filter(User.id == user_id)
    if for_update:
        q = q.with_for_update()
    user = q.first()
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def create_user(
    db: Session,
    name: Optional[str] = None,
    nickname: Optional[str] = None,
    timezone: Optional[str] = None,
    locale: str = "en",
    seed_actions: bool = False,
) -> User:
    if timezone:
        resolve_timezone(timezone)
    user = User(
        name=name,
        nickname=nickname,
        timezone=timezone,
        locale=locale,
        total_xp=0,
        total_coins=0,
        current_streak=0,
        longest_streak=0,
        avatar_stage=1,
    )
    db.add(user)
    db.flush()

    if seed_actions:
        # Imported here: actions imports this module for credit_xp.
        from liferpg.services.actions import seed_default_actions
        seed_default_actions(db, user, commit=False)

    db.commit()
    db.refresh(user)
    logger.info("user created", extra={"user_id": user.id})
    return user


def credit_xp(user: User, delta: int) -> LevelInfo:
    """
    Add (or, for reversals, subtract) XP and keep avatar_stage in step with
    the level. Never lets the total drop below zero.
    """
    user.total_xp = max(user.total_xp + delta, 0)
    info = level_of(user.total_xp)
    user.avatar_stage = avatar_stage(info.level)
    return info


def get_profile(db: Session, user: User) -> dict[str, Any]:
    info = level_of(user.total_xp)
    counts = {
        "log_entries": db.query(func.count(LogEntry.id)).filter(LogEntry.user_id == user.id).scalar() or 0,
        "kanban_tasks": db.query(func.count(KanbanTask.id)).filter(KanbanTask.user_id == user.id).scalar() or 0,
        "habits": db.query(func.count(Habit.id)).filter(Habit.user_id == user.id).scalar() or 0,
    }
    return {
        "user": user,
        "level": info,
        "avatar_title": avatar_title(info.level),
        "counts": counts,
    }


def update_profile(db: Session, user: User, changes: dict[str, Any]) -> User:
    if changes.get("timezone"):
        resolve_timezone(changes["timezone"])
    for key in PROFILE_FIELDS:
        if key in changes and (changes[key] is not None or key != "locale"):
            setattr(user, key, changes[key])
    db.commit()
    db.refresh(user)
    return user


def reset_progress(db: Session, user: User) -> None:
    """Wipe all history and progression; actions and rewards survive."""
    uid = user.id
    db.query(LogEntry).filter(LogEntry.user_id == uid).delete(synchronize_session=False)
    db.query(HabitLog).filter(HabitLog.user_id == uid).delete(synchronize_session=False)
    db.query(DailyCheckin).filter(DailyCheckin.user_id == uid).delete(synchronize_session=False)
    db.query(KanbanTask).filter(KanbanTask.user_id == uid).delete(synchronize_session=False)
    for log in db.query(EnergyLog).filter(EnergyLog.user_id == uid).all():
        db.delete(log)  # cascades to energy_events
    db.query(Habit).filter(Habit.user_id == uid).delete(synchronize_session=False)

    user.total_xp = 0
    user.total_coins = 0
    user.current_streak = 0
    user.longest_streak = 0
    user.last_active_date = None
    user.avatar_stage = 1
    db.commit()
    logger.info("progress reset", extra={"user_id": uid})


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _csv(header: list[str], rows: list[list[Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def export_csv(db: Session, user: User, now: Optional[datetime] = None) -> dict[str, str]:
    """CSV per table, stamped with the local date of the export."""
    uid = user.id
    actions = db.query(Action).filter(Action.user_id == uid).order_by(Action.id.desc()).all()
    logs = db.query(LogEntry).filter(LogEntry.user_id == uid).order_by(LogEntry.day.desc()).all()
    habits = db.query(Habit).filter(Habit.user_id == uid).order_by(Habit.id.desc()).all()
    habit_logs = db.query(HabitLog).filter(HabitLog.user_id == uid).order_by(HabitLog.day.desc()).all()

    return {
        "exported_on": local_date_key(now or utcnow(), user.timezone),
        "actions": _csv(
            ["name", "block", "xp", "difficulty", "is_active"],
            [[a.name, _ev(a.block), a.xp, _ev(a.difficulty), a.is_active] for a in actions],
        ),
        "logs": _csv(
            ["action", "block", "xp_awarded", "day", "note"],
            [[l.action.name, _ev(l.action.block), l.xp_awarded, l.day.isoformat(), l.note or ""] for l in logs],
        ),
        "habits": _csv(
            ["name", "block", "frequency", "xp_per_log", "current_streak", "longest_streak", "level", "is_active"],
            [
                [h.name, _ev(h.block), _ev(h.frequency), h.xp_per_log,
                 h.current_streak, h.longest_streak, h.level, h.is_active]
                for h in habits
            ],
        ),
        "habit_logs": _csv(
            ["habit", "block", "day", "xp_awarded"],
            [[hl.habit.name, _ev(hl.habit.block), hl.day.isoformat(), hl.xp_awarded] for hl in habit_logs],
        ),
    }
