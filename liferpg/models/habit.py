from datetime import datetime, date
from sqlalchemy import (
    Integer, String, Boolean, DateTime, Date, Enum, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from liferpg.db.base import Base
from liferpg.models.action import Block


class HabitFrequency(str, enum.Enum):
    DAILY = "DAILY"
    WEEKDAYS = "WEEKDAYS"
    THREE_PER_WEEK = "THREE_PER_WEEK"
    CUSTOM = "CUSTOM"


class Habit(Base):
    """
    A recurring habit. `level`, `total_logs` and the streak counters are
    derived from the habit's logs and rewritten on every log / un-log.
    """

    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    block: Mapped[str] = mapped_column(Enum(Block, name="block_enum"), nullable=False)
    frequency: Mapped[str] = mapped_column(
        Enum(HabitFrequency, name="habit_frequency_enum"),
        nullable=False,
        default=HabitFrequency.DAILY,
    )
    # Comma-separated weekday numbers (0 = Monday) for CUSTOM frequency.
    custom_days: Mapped[str | None] = mapped_column(String(32), nullable=True)
    target_per_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    xp_per_log: Mapped[int] = mapped_column(Integer, nullable=False, default=10)

    total_logs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    logs: Mapped[list["HabitLog"]] = relationship(
        back_populates="habit",
        cascade="all, delete-orphan",
        order_by="HabitLog.day.desc()",
    )


class HabitLog(Base):
    __tablename__ = "habit_logs"
    __table_args__ = (UniqueConstraint("habit_id", "day", name="uq_habit_log_habit_day"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    habit_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    # XP credited for this log, reversed verbatim when the log is removed.
    xp_awarded: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    habit: Mapped[Habit] = relationship(back_populates="logs")
