"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BLOCKS = (
    "HEALTH", "WORK", "DEVELOPMENT", "RELATIONSHIPS",
    "FINANCE", "SPIRITUALITY", "BRIGHTNESS", "HOME",
)


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, create_type=False)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _user_fk() -> sa.Column:
    return sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    # --- ENUM types ---
    bind = op.get_bind()
    sa.Enum(*BLOCKS, name="block_enum").create(bind, checkfirst=True)
    sa.Enum("EASY", "NORMAL", "HARD", "VERY_HARD", "LEGENDARY", name="difficulty_enum").create(bind, checkfirst=True)
    sa.Enum("DAILY", "WEEKDAYS", "THREE_PER_WEEK", "CUSTOM", name="habit_frequency_enum").create(bind, checkfirst=True)
    sa.Enum("BACKLOG", "TODO", "IN_PROGRESS", "DONE", "ARCHIVED", name="kanban_status_enum").create(bind, checkfirst=True)
    sa.Enum("MINE", "DELEGATED", "STUCK", name="task_owner_enum").create(bind, checkfirst=True)

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=True),
        sa.Column("nickname", sa.String(64), nullable=True),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("locale", sa.String(8), nullable=False, server_default="en"),
        sa.Column("total_xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_coins", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active_date", sa.Date(), nullable=True),
        sa.Column("avatar_stage", sa.Integer(), nullable=False, server_default="1"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])

    # --- actions / log_entries ---
    op.create_table(
        "actions",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("block", _enum("block_enum", *BLOCKS), nullable=False),
        sa.Column("xp", sa.Integer(), nullable=False),
        sa.Column("difficulty", _enum("difficulty_enum", "EASY", "NORMAL", "HARD", "VERY_HARD", "LEGENDARY"),
                  nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_actions_id", "actions", ["id"])
    op.create_index("ix_actions_user_id", "actions", ["user_id"])

    op.create_table(
        "log_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("action_id", sa.Integer(), sa.ForeignKey("actions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("xp_awarded", sa.Integer(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_log_entries_id", "log_entries", ["id"])
    op.create_index("ix_log_entries_user_id", "log_entries", ["user_id"])
    op.create_index("ix_log_entries_action_id", "log_entries", ["action_id"])
    op.create_index("ix_log_entries_day", "log_entries", ["day"])

    # --- habits / habit_logs ---
    op.create_table(
        "habits",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("block", _enum("block_enum", *BLOCKS), nullable=False),
        sa.Column("frequency", _enum("habit_frequency_enum", "DAILY", "WEEKDAYS", "THREE_PER_WEEK", "CUSTOM"),
                  nullable=False),
        sa.Column("custom_days", sa.String(32), nullable=True),
        sa.Column("target_per_week", sa.Integer(), nullable=True),
        sa.Column("xp_per_log", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("total_logs", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_habits_id", "habits", ["id"])
    op.create_index("ix_habits_user_id", "habits", ["user_id"])

    op.create_table(
        "habit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("habit_id", sa.Integer(), sa.ForeignKey("habits.id", ondelete="CASCADE"), nullable=False),
        _user_fk(),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("xp_awarded", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("habit_id", "day", name="uq_habit_log_habit_day"),
    )
    op.create_index("ix_habit_logs_id", "habit_logs", ["id"])
    op.create_index("ix_habit_logs_habit_id", "habit_logs", ["habit_id"])
    op.create_index("ix_habit_logs_user_id", "habit_logs", ["user_id"])
    op.create_index("ix_habit_logs_day", "habit_logs", ["day"])

    # --- kanban_tasks ---
    op.create_table(
        "kanban_tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", _enum("kanban_status_enum", "BACKLOG", "TODO", "IN_PROGRESS", "DONE", "ARCHIVED"),
                  nullable=False),
        sa.Column("owner", _enum("task_owner_enum", "MINE", "DELEGATED", "STUCK"), nullable=False),
        sa.Column("importance", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("discomfort", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("urgency", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("block", _enum("block_enum", *BLOCKS), nullable=True),
        sa.Column("delegated_to", sa.String(128), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_main_task", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("main_task_date", sa.Date(), nullable=True),
        sa.Column("xp_awarded", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_day", sa.Date(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_kanban_tasks_id", "kanban_tasks", ["id"])
    op.create_index("ix_kanban_tasks_user_id", "kanban_tasks", ["user_id"])
    op.create_index("ix_kanban_tasks_completed_day", "kanban_tasks", ["completed_day"])

    # --- energy_logs / energy_events ---
    op.create_table(
        "energy_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("sleep_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("physical_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("mental_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("base_energy", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("streak_bonus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_energy", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("spent_total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recovered_total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_burnout", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("morning_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "day", name="uq_energy_log_user_day"),
    )
    op.create_index("ix_energy_logs_id", "energy_logs", ["id"])
    op.create_index("ix_energy_logs_user_id", "energy_logs", ["user_id"])
    op.create_index("ix_energy_logs_day", "energy_logs", ["day"])

    op.create_table(
        "energy_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("energy_log_id", sa.Integer(), sa.ForeignKey("energy_logs.id", ondelete="CASCADE"),
                  nullable=False),
        sa.Column("kind", sa.String(16), nullable=False),
        sa.Column("recovery_type", sa.String(32), nullable=True),
        sa.Column("amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bonus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("applied", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_energy_events_id", "energy_events", ["id"])
    op.create_index("ix_energy_events_energy_log_id", "energy_events", ["energy_log_id"])

    # --- rewards ---
    op.create_table(
        "rewards",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(16), nullable=True),
        sa.Column("coin_cost", sa.Integer(), nullable=False),
        sa.Column("is_redeemed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rewards_id", "rewards", ["id"])
    op.create_index("ix_rewards_user_id", "rewards", ["user_id"])

    # --- daily_checkins ---
    op.create_table(
        "daily_checkins",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk(),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("main_task_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_tasks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_tasks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("xp_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("energy_level", sa.Integer(), nullable=True),
        sa.Column("mood_level", sa.Integer(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "day", name="uq_checkin_user_day"),
    )
    op.create_index("ix_daily_checkins_id", "daily_checkins", ["id"])
    op.create_index("ix_daily_checkins_user_id", "daily_checkins", ["user_id"])
    op.create_index("ix_daily_checkins_day", "daily_checkins", ["day"])


def downgrade() -> None:
    op.drop_table("daily_checkins")
    op.drop_table("rewards")
    op.drop_table("energy_events")
    op.drop_table("energy_logs")
    op.drop_table("kanban_tasks")
    op.drop_table("habit_logs")
    op.drop_table("habits")
    op.drop_table("log_entries")
    op.drop_table("actions")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS task_owner_enum")
    op.execute("DROP TYPE IF EXISTS kanban_status_enum")
    op.execute("DROP TYPE IF EXISTS habit_frequency_enum")
    op.execute("DROP TYPE IF EXISTS difficulty_enum")
    op.execute("DROP TYPE IF EXISTS block_enum")
