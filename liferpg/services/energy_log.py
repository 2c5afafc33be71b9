"""
Energy log persistence around the pure economy in services/energy.py.

Each request:
  1. loads (or lazily creates) today's EnergyLog row FOR UPDATE
  2. replays the row's events into an EnergyDay
  3. applies one transition, appends the event, writes the snapshot back
  4. commits once

The row lock serialises concurrent spend / recover calls for the same day,
so a quota check and the insert that consumes it cannot interleave. Before
today's row exists there is nothing to lock, so the user row is locked first
and the insert runs in a savepoint: a writer that lost the race re-reads the
winner's row instead of failing on uq_energy_log_user_day.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from liferpg.core.errors import InvalidInputError, RecoveryLimitReachedError
from liferpg.models.energy import EnergyEvent, EnergyLog
from liferpg.models.user import User
from liferpg.services import energy as economy
from liferpg.services.progression import round_half_up

logger = logging.getLogger("liferpg.energy")


@dataclass
class EnergyChange:
    log: EnergyLog
    applied: int


def _records(log: EnergyLog) -> list[economy.EnergyEventRecord]:
    return [
        economy.EnergyEventRecord(
            kind=ev.kind, amount=ev.amount, bonus=ev.bonus, recovery_type=ev.recovery_type,
        )
        for ev in log.events
    ]


def current_day(log: EnergyLog) -> economy.EnergyDay:
    return economy.replay(_records(log))


def _store(log: EnergyLog, day: economy.EnergyDay) -> None:
    log.base_energy = day.base_energy
    log.streak_bonus = day.streak_bonus
    log.current_energy = day.current_energy
    log.spent_total = day.spent_total
    log.recovered_total = day.recovered_total
    log.morning_done = day.morning_done


def _prior_days(db: Session, user: User, today: date) -> list[economy.PriorDay]:
    rows = (
        db.query(EnergyLog)
        .filter(EnergyLog.user_id == user.id, EnergyLog.day < today)
        .order_by(EnergyLog.day.desc())
        .limit(economy.RECENT_WINDOW)
        .all()
    )
    return [
        economy.PriorDay(
            current_energy=r.current_energy,
            sleep_score=r.sleep_score,
            morning_done=r.morning_done,
        )
        for r in rows
    ]


def _find_today(db: Session, user: User, today: date, for_update: bool = False) -> Optional[EnergyLog]:
    q = db.query(EnergyLog).filter(EnergyLog.user_id == user.id, EnergyLog.day == today)
    if for_update:
        q = q.with_for_update()
    return q.first()


def get_or_create_today(db: Session, user: User, today: date) -> EnergyLog:
    """Locked row for today; burnout is decided here, once, on creation."""
    db.query(User).filter(User.id == user.id).with_for_update().one()
    log = _find_today(db, user, today, for_update=True)
    if log is not None:
        return log

    is_burnout = economy.detect_burnout(_prior_days(db, user, today))
    log = EnergyLog(
        user_id=user.id,
        day=today,
        sleep_score=0,
        physical_score=0,
        mental_score=0,
        base_energy=economy.DEFAULT_ENERGY,
        streak_bonus=0,
        current_energy=economy.DEFAULT_ENERGY,
        spent_total=0,
        recovered_total=0,
        is_burnout=is_burnout,
        morning_done=False,
    )
    try:
        with db.begin_nested():
            db.add(log)
    except IntegrityError:
        logger.info("energy log created concurrently", extra={"user_id": user.id, "day": today.isoformat()})
        return _find_today(db, user, today, for_update=True)
    if is_burnout:
        logger.warning("burnout active", extra={"user_id": user.id, "day": today.isoformat()})
    return log


def get_today(db: Session, user: User, today: date) -> EnergyLog:
    log = get_or_create_today(db, user, today)
    db.commit()
    db.refresh(log)
    return log


def submit_morning(
    db: Session,
    user: User,
    today: date,
    sleep_score: int,
    physical_score: int,
    mental_score: int,
) -> EnergyLog:
    base = economy.calc_base_energy(sleep_score, physical_score, mental_score)
    log = get_or_create_today(db, user, today)

    base = economy.apply_burnout_penalty(base, log.is_burnout)
    bonus = economy.morning_streak_bonus(_prior_days(db, user, today))

    day = economy.apply_morning(current_day(log), base, bonus)
    log.events.append(
        EnergyEvent(kind=economy.EventKind.MORNING, amount=base, bonus=bonus, applied=0)
    )
    log.sleep_score = sleep_score
    log.physical_score = physical_score
    log.mental_score = mental_score
    _store(log, day)

    db.commit()
    db.refresh(log)
    logger.info(
        "morning submitted",
        extra={"user_id": user.id, "base_energy": base, "streak_bonus": bonus},
    )
    return log


def resolve_cost(
    amount: Optional[int] = None,
    difficulty: Optional[str] = None,
    importance: Optional[int] = None,
    discomfort: Optional[int] = None,
    urgency: Optional[int] = None,
) -> int:
    """A spend is sized by an explicit amount, a difficulty, or kanban ratings."""
    if amount is not None:
        return amount
    if difficulty is not None:
        return economy.difficulty_cost(difficulty)
    if importance is not None and discomfort is not None and urgency is not None:
        return economy.kanban_energy_cost(importance, discomfort, urgency)
    raise InvalidInputError(
        "Provide amount, difficulty, or importance/discomfort/urgency.", field="amount"
    )


def spend_energy(db: Session, user: User, today: date, amount: int) -> EnergyChange:
    log = get_or_create_today(db, user, today)
    before = current_day(log)
    day, spent = economy.apply_spend(before, amount)

    log.events.append(EnergyEvent(kind=economy.EventKind.SPEND, amount=amount, applied=spent))
    _store(log, day)
    db.commit()
    db.refresh(log)

    if day.is_overdraft and not before.is_overdraft:
        logger.warning("energy overdraft", extra={"user_id": user.id, "current_energy": day.current_energy})
    return EnergyChange(log=log, applied=spent)


def recover_energy(db: Session, user: User, today: date, recovery_type: str) -> EnergyChange:
    log = get_or_create_today(db, user, today)
    try:
        day, restored = economy.apply_recovery(current_day(log), recovery_type)
    except RecoveryLimitReachedError:
        logger.warning(
            "recovery quota reached",
            extra={"user_id": user.id, "recovery_type": recovery_type},
        )
        raise

    log.events.append(
        EnergyEvent(
            kind=economy.EventKind.RECOVER,
            recovery_type=recovery_type,
            amount=restored,
            applied=restored,
        )
    )
    _store(log, day)
    db.commit()
    db.refresh(log)
    return EnergyChange(log=log, applied=restored)


def _avg(values: list[int]) -> int:
    if not values:
        return 0
    return round_half_up(Decimal(sum(values)) / len(values))


def get_history(db: Session, user: User, today: date, range_days: int = 7) -> dict[str, Any]:
    """Logs for the last `range_days` days including today, oldest first, plus stats."""
    if range_days < 1:
        raise InvalidInputError("range must be at least 1 day.", field="range")
    since = today - timedelta(days=range_days - 1)
    logs = (
        db.query(EnergyLog)
        .filter(EnergyLog.user_id == user.id, EnergyLog.day >= since, EnergyLog.day <= today)
        .order_by(EnergyLog.day.asc())
        .all()
    )
    mornings = [l for l in logs if l.morning_done]
    stats = {
        "total_days": len(logs),
        "avg_energy": _avg([l.current_energy for l in logs]),
        "overdraft_days": sum(1 for l in logs if l.current_energy < 0),
        "burnout_days": sum(1 for l in logs if l.is_burnout),
        "avg_sleep": _avg([l.sleep_score for l in mornings]),
        "avg_physical": _avg([l.physical_score for l in mornings]),
        "avg_mental": _avg([l.mental_score for l in mornings]),
    }
    return {"logs": logs, "stats": stats}


def recovery_catalog(db: Session, user: User, today: date) -> list[dict[str, Any]]:
    log = _find_today(db, user, today)
    day = current_day(log) if log is not None else economy.EnergyDay()
    catalog = []
    for r in economy.RECOVERY_TYPES:
        used = day.recovery_count(r.type)
        catalog.append({
            "type": r.type,
            "label": r.label,
            "ep": r.ep,
            "max_per_day": r.max_per_day,
            "icon": r.icon,
            "used_today": used,
            "remaining": None if r.max_per_day is None else max(r.max_per_day - used, 0),
        })
    return catalog
