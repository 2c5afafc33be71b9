from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from liferpg.db.base import Base


class Block(str, enum.Enum):
    """Life domain used to group actions, habits and kanban tasks."""
    HEALTH = "HEALTH"
    WORK = "WORK"
    DEVELOPMENT = "DEVELOPMENT"
    RELATIONSHIPS = "RELATIONSHIPS"
    FINANCE = "FINANCE"
    SPIRITUALITY = "SPIRITUALITY"
    BRIGHTNESS = "BRIGHTNESS"
    HOME = "HOME"


class Difficulty(str, enum.Enum):
    EASY = "EASY"
    NORMAL = "NORMAL"
    HARD = "HARD"
    VERY_HARD = "VERY_HARD"
    LEGENDARY = "LEGENDARY"


class Action(Base):
    __tablename__ = "actions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    block: Mapped[str] = mapped_column(Enum(Block, name="block_enum"), nullable=False)
    xp: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty: Mapped[str] = mapped_column(
        Enum(Difficulty, name="difficulty_enum"),
        nullable=False,
        default=Difficulty.EASY,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class LogEntry(Base):
    """One logged action; `xp_awarded` is frozen at creation."""

    __tablename__ = "log_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("actions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    xp_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    action: Mapped[Action] = relationship(lazy="joined")
