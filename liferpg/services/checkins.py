"""
Daily check-ins: one row per (user, day), created or overwritten on submit.

The first write of a day inserts under the user row lock and inside a
savepoint, so two first writes for the same day end with one row.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from liferpg.models.checkin import DailyCheckin
from liferpg.models.user import User

CHECKIN_FIELDS = (
    "main_task_done", "total_tasks", "completed_tasks", "xp_earned",
    "energy_level", "mood_level", "note",
)


def _get(db: Session, user: User, day: date) -> DailyCheckin | None:
    return (
        db.query(DailyCheckin)
        .filter(DailyCheckin.user_id == user.id, DailyCheckin.day == day)
        .with_for_update()
        .first()
    )


def _get_or_create(db: Session, user: User, day: date) -> DailyCheckin:
    checkin = _get(db, user, day)
    if checkin is not None:
        return checkin
    checkin = DailyCheckin(user_id=user.id, day=day, xp_earned=0, total_tasks=0, completed_tasks=0)
    try:
        with db.begin_nested():
            db.add(checkin)
    except IntegrityError:
        return _get(db, user, day)
    return checkin


def upsert_checkin(db: Session, user: User, day: date, fields: dict[str, Any]) -> DailyCheckin:
    db.query(User).filter(User.id == user.id).with_for_update().one()
    checkin = _get_or_create(db, user, day)
    for key in CHECKIN_FIELDS:
        if key in fields and fields[key] is not None:
            setattr(checkin, key, fields[key])
    db.commit()
    db.refresh(checkin)
    return checkin


def record_main_task_done(db: Session, user: User, day: date, xp: int) -> DailyCheckin:
    """Flush-only; the kanban completion commits it together with the XP.

    The caller already holds the user row lock.
    """
    checkin = _get_or_create(db, user, day)
    checkin.main_task_done = True
    checkin.xp_earned += xp
    db.flush()
    return checkin


def list_checkins(db: Session, user: User, today: date, range_days: int = 90) -> list[DailyCheckin]:
    since = today - timedelta(days=range_days)
    return (
        db.query(DailyCheckin)
        .filter(DailyCheckin.user_id == user.id, DailyCheckin.day >= since)
        .order_by(DailyCheckin.day.asc())
        .all()
    )
