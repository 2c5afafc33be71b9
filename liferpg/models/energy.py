"""
EnergyLog: one row per user per local calendar day.

The numeric columns are a snapshot of the fold over the day's
`EnergyEvent` rows (see liferpg/services/energy.py). The row is also the
lock target that serialises concurrent spend / recover requests.

EnergyEvent: append-only log of what happened to the day:
  "morning"  — morning input; amount = stored base energy, bonus = streak bonus
  "spend"    — amount = requested cost, applied = cost actually deducted
  "recover"  — recovery_type set; applied = EP actually restored
"""
from datetime import datetime, date
from sqlalchemy import (
    Integer, String, Boolean, DateTime, Date, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liferpg.db.base import Base


class EnergyLog(Base):
    __tablename__ = "energy_logs"
    __table_args__ = (UniqueConstraint("user_id", "day", name="uq_energy_log_user_day"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    sleep_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    physical_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mental_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    base_energy: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    streak_bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_energy: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    spent_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    recovered_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_burnout: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    morning_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    events: Mapped[list["EnergyEvent"]] = relationship(
        back_populates="energy_log",
        cascade="all, delete-orphan",
        order_by="EnergyEvent.id",
    )


class EnergyEvent(Base):
    __tablename__ = "energy_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    energy_log_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("energy_logs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    recovery_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    applied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    energy_log: Mapped[EnergyLog] = relationship(back_populates="events")
