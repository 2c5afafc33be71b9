"""
Kanban router.

GET    /kanban        — Board (everything except ARCHIVED)
POST   /kanban        — Create a task
PATCH  /kanban/{id}   — Update; the first move into DONE pays XP
DELETE /kanban/{id}   — Delete a task
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.kanban import KanbanCreate, KanbanResponse, KanbanUpdate, KanbanUpdateResponse
from liferpg.services import kanban as svc
from liferpg.services.timezone import local_date, utcnow

router = APIRouter(prefix="/kanban", tags=["kanban"])


@router.get("", response_model=list[KanbanResponse], summary="List board tasks")
def read_board(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return svc.list_tasks(db, user)


@router.post(
    "",
    response_model=KanbanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
def create(payload: KanbanCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return svc.create_task(db, user, payload.model_dump())


@router.patch(
    "/{task_id}",
    response_model=KanbanUpdateResponse,
    summary="Update a task",
    responses={
        404: {"model": ErrorResponse, "description": "Task not found."},
        422: {"model": ErrorResponse, "description": "Rating outside 1-10."},
    },
)
def update(
    task_id: int,
    payload: KanbanUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Moving a task from any other status into DONE awards
    `round(importance × discomfort × urgency / 10)` XP using the ratings as
    they are after this update. The amount is frozen on the task; a task is
    paid at most once.
    """
    now = utcnow()
    result = svc.update_task(
        db, user, task_id, payload.model_dump(exclude_unset=True),
        now=now, today=local_date(now, user.timezone),
    )
    return KanbanUpdateResponse(
        task=KanbanResponse.model_validate(result.task),
        xp_awarded=result.xp_awarded,
    )


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={404: {"model": ErrorResponse, "description": "Task not found."}},
)
def delete(task_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    svc.delete_task(db, user, task_id)
