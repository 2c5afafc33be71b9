from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from liferpg.db.base import Base
from liferpg.models.action import Block


class KanbanStatus(str, enum.Enum):
    BACKLOG = "BACKLOG"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    ARCHIVED = "ARCHIVED"


class TaskOwner(str, enum.Enum):
    MINE = "MINE"
    DELEGATED = "DELEGATED"
    STUCK = "STUCK"


class KanbanTask(Base):
    __tablename__ = "kanban_tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        Enum(KanbanStatus, name="kanban_status_enum"),
        nullable=False,
        default=KanbanStatus.TODO,
    )
    owner: Mapped[str] = mapped_column(
        Enum(TaskOwner, name="task_owner_enum"),
        nullable=False,
        default=TaskOwner.MINE,
    )
    importance: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    discomfort: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    urgency: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    block: Mapped[str | None] = mapped_column(Enum(Block, name="block_enum"), nullable=True)
    delegated_to: Mapped[str | None] = mapped_column(String(128), nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_main_task: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    main_task_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Set once, on the first transition into DONE; never recomputed.
    xp_awarded: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_day: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
