"""
Weekly life-balance report.

For each block, XP earned in the Monday-started week from action logs plus
the frozen xp_awarded of kanban tasks completed that week (tasks without a
block are not counted), compared against a per-block cap and the previous
week.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from liferpg.core.errors import InvalidInputError
from liferpg.models.action import Block, LogEntry
from liferpg.models.kanban import KanbanStatus, KanbanTask
from liferpg.models.user import User
from liferpg.services.progression import round_half_up

DEFAULT_CAPS: dict[Block, int] = {
    Block.HEALTH: 100,
    Block.WORK: 120,
    Block.DEVELOPMENT: 80,
    Block.RELATIONSHIPS: 60,
    Block.FINANCE: 60,
    Block.SPIRITUALITY: 60,
    Block.BRIGHTNESS: 60,
    Block.HOME: 80,
}


@dataclass(frozen=True)
class BlockBalance:
    block: str
    xp: int
    cap: int
    percentage: int
    trend: str


@dataclass(frozen=True)
class WeeklyReport:
    week_start: date
    blocks: list[BlockBalance]
    total_xp: int


def balance_percentage(xp: int, cap: int) -> int:
    return min(round_half_up(Decimal(xp) / cap * 100), 100)


def trend(xp: int, prev_xp: int) -> str:
    if xp > prev_xp:
        return "up"
    if xp < prev_xp:
        return "down"
    return "same"


def _key(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _xp_by_block(db: Session, user: User, start: date) -> dict[str, int]:
    end = start + timedelta(days=7)
    totals: dict[str, int] = defaultdict(int)

    logs = (
        db.query(LogEntry)
        .filter(LogEntry.user_id == user.id, LogEntry.day >= start, LogEntry.day < end)
        .all()
    )
    for entry in logs:
        totals[_key(entry.action.block)] += entry.xp_awarded

    tasks = (
        db.query(KanbanTask)
        .filter(
            KanbanTask.user_id == user.id,
            KanbanTask.status == KanbanStatus.DONE,
            KanbanTask.block.isnot(None),
            KanbanTask.completed_day >= start,
            KanbanTask.completed_day < end,
        )
        .all()
    )
    for task in tasks:
        totals[_key(task.block)] += task.xp_awarded or 0
    return totals


def weekly_report(db: Session, user: User, week_start: date) -> WeeklyReport:
    if week_start.weekday() != 0:
        raise InvalidInputError("week_start must be a Monday.", field="week_start")

    current = _xp_by_block(db, user, week_start)
    previous = _xp_by_block(db, user, week_start - timedelta(days=7))

    blocks = []
    for block, cap in DEFAULT_CAPS.items():
        xp = current.get(block.value, 0)
        blocks.append(BlockBalance(
            block=block.value,
            xp=xp,
            cap=cap,
            percentage=balance_percentage(xp, cap),
            trend=trend(xp, previous.get(block.value, 0)),
        ))
    return WeeklyReport(week_start=week_start, blocks=blocks, total_xp=sum(current.values()))
