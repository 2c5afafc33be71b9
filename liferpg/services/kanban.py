"""
Kanban board service.

Completion rule
---------------
The first time a task moves from any other status into DONE:
  xp_awarded   := kanban_xp(importance, discomfort, urgency)   (ratings after this update)
  completed_at := now, completed_day := today
  user.total_xp += xp_awarded
  (main task with a date) daily check-in for that date: main_task_done, xp_earned += xp
in the same commit as the status change.

xp_awarded is frozen: re-saving a DONE task, editing its ratings, or moving
it out of DONE and back again never pays a second time. Moving a task out
of DONE does not take the XP back either. completed_at and completed_day
keep the first completion, so the weekly report books the XP in the week it
was credited.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from liferpg.core.errors import NotFoundError
from liferpg.models.kanban import KanbanStatus, KanbanTask, TaskOwner
from liferpg.models.user import User
from liferpg.services.checkins import record_main_task_done
from liferpg.services.progression import kanban_xp, validate_rating
from liferpg.services.users import credit_xp

logger = logging.getLogger("liferpg.kanban")

RATING_FIELDS = ("importance", "discomfort", "urgency")
EDITABLE_FIELDS = (
    "title", "description", "status", "owner", "importance", "discomfort", "urgency",
    "block", "delegated_to", "due_date", "position", "is_main_task", "main_task_date",
)
NULLABLE_FIELDS = ("description", "block", "delegated_to", "due_date", "main_task_date")


@dataclass
class KanbanUpdateResult:
    task: KanbanTask
    xp_awarded: int = 0


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def get_task(db: Session, user: User, task_id: int, for_update: bool = False) -> KanbanTask:
    q = db.query(KanbanTask).filter(KanbanTask.id == task_id, KanbanTask.user_id == user.id)
    if for_update:
        q = q.with_for_update()
    task = q.first()
    if task is None:
        raise NotFoundError("KanbanTask", task_id)
    return task


def list_tasks(db: Session, user: User) -> list[KanbanTask]:
    """All tasks except archived ones, board order."""
    return (
        db.query(KanbanTask)
        .filter(KanbanTask.user_id == user.id, KanbanTask.status != KanbanStatus.ARCHIVED)
        .order_by(KanbanTask.position.asc(), KanbanTask.id.desc())
        .all()
    )


def create_task(db: Session, user: User, fields: dict[str, Any]) -> KanbanTask:
    for name in RATING_FIELDS:
        if fields.get(name) is not None:
            validate_rating(fields[name], name)

    task = KanbanTask(
        user_id=user.id,
        title=fields["title"],
        description=fields.get("description"),
        status=fields.get("status") or KanbanStatus.TODO,
        owner=fields.get("owner") or TaskOwner.MINE,
        importance=fields.get("importance") or 5,
        discomfort=fields.get("discomfort") or 5,
        urgency=fields.get("urgency") or 5,
        block=fields.get("block"),
        delegated_to=fields.get("delegated_to"),
        due_date=fields.get("due_date"),
        position=fields.get("position") or 0,
        is_main_task=bool(fields.get("is_main_task")),
        main_task_date=fields.get("main_task_date"),
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(
    db: Session,
    user: User,
    task_id: int,
    changes: dict[str, Any],
    now: datetime,
    today: date,
) -> KanbanUpdateResult:
    task = get_task(db, user, task_id, for_update=True)
    for name in RATING_FIELDS:
        if changes.get(name) is not None:
            validate_rating(changes[name], name)

    was_done = _ev(task.status) == KanbanStatus.DONE.value
    for key in EDITABLE_FIELDS:
        if key in changes and (changes[key] is not None or key in NULLABLE_FIELDS):
            setattr(task, key, changes[key])

    moving_to_done = (
        "status" in changes
        and _ev(changes["status"]) == KanbanStatus.DONE.value
        and not was_done
    )

    xp = 0
    if moving_to_done:
        if task.xp_awarded is None:
            task.completed_at = now
            task.completed_day = today
            xp = kanban_xp(task.importance, task.discomfort, task.urgency)
            task.xp_awarded = xp
            locked = db.query(User).filter(User.id == user.id).with_for_update().one()
            credit_xp(locked, xp)
            if task.is_main_task and task.main_task_date:
                record_main_task_done(db, locked, task.main_task_date, xp)
            logger.info("kanban task completed", extra={"task_id": task.id, "xp": xp})

    db.commit()
    db.refresh(task)
    return KanbanUpdateResult(task=task, xp_awarded=xp)


def delete_task(db: Session, user: User, task_id: int) -> None:
    task = get_task(db, user, task_id)
    db.delete(task)
    db.commit()
