"""
Service-level tests against the SQLite session.

Every test gets its own user (see conftest), and passes `today` explicitly
so day boundaries never depend on the machine clock.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from liferpg.core.errors import (
    InsufficientCoinsError,
    InvalidInputError,
    NotFoundError,
    RecoveryLimitReachedError,
)
from liferpg.models.action import Block, Difficulty
from liferpg.models.checkin import DailyCheckin
from liferpg.models.energy import EnergyLog
from liferpg.models.kanban import KanbanStatus
from liferpg.models.user import User
from liferpg.services import checkins as checkins_svc
from liferpg.services import actions as actions_svc
from liferpg.services import energy_log as energy_svc
from liferpg.services import habits as habits_svc
from liferpg.services import kanban as kanban_svc
from liferpg.services import rewards as rewards_svc
from liferpg.services.checkins import list_checkins, upsert_checkin
from liferpg.services.users import credit_xp, export_csv, get_profile, reset_progress
from liferpg.services.weekly import weekly_report

TODAY = date(2026, 3, 18)          # a Wednesday
MONDAY = date(2026, 3, 16)
NOW = datetime(2026, 3, 18, 9, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _action(db, user, xp=10, block=Block.HEALTH):
    return actions_svc.create_action(db, user, name=f"Action {xp}", block=block, xp=xp)


def _task(db, user, **fields):
    fields.setdefault("title", "Ship it")
    return kanban_svc.create_task(db, user, fields)


# ---------------------------------------------------------------------------
# Users / profile
# ---------------------------------------------------------------------------

class TestUsers:
    def test_credit_xp_keeps_avatar_in_step(self, db, user):
        credit_xp(user, 1650)
        assert user.total_xp == 1650
        assert user.avatar_stage == 3

    def test_credit_xp_never_negative(self, db, user):
        credit_xp(user, -50)
        assert user.total_xp == 0
        assert user.avatar_stage == 1

    def test_profile_counts(self, db, user):
        action = _action(db, user)
        actions_svc.log_action(db, user, action.id, today=TODAY)
        _task(db, user)
        profile = get_profile(db, user)
        assert profile["counts"] == {"log_entries": 1, "kanban_tasks": 1, "habits": 0}
        assert profile["level"].level == 1
        assert profile["avatar_title"] == "Seedling"

    def test_reset_progress(self, db, user):
        action = _action(db, user, xp=40)
        actions_svc.log_action(db, user, action.id, today=TODAY)
        energy_svc.get_today(db, user, TODAY)
        reset_progress(db, user)

        assert user.total_xp == 0
        assert user.current_streak == 0
        assert user.last_active_date is None
        assert actions_svc.list_logs(db, user, day=TODAY) == []
        assert db.query(EnergyLog).filter(EnergyLog.user_id == user.id).count() == 0
        # actions survive a progress reset
        assert len(actions_svc.list_actions(db, user)) == 1

    def test_export_csv(self, db, user):
        action = _action(db, user, xp=12)
        actions_svc.log_action(db, user, action.id, today=TODAY, note="morning")
        out = export_csv(db, user, now=datetime(2026, 3, 18, 23, 30, tzinfo=timezone.utc))
        assert out["exported_on"] == "2026-03-18"
        assert out["actions"].splitlines()[0] == "name,block,xp,difficulty,is_active"
        assert "Action 12,HEALTH,12,2026-03-18,morning" in out["logs"]


# ---------------------------------------------------------------------------
# Actions & logs
# ---------------------------------------------------------------------------

class TestActions:
    def test_create_defaults_to_easy(self, db, user):
        action = _action(db, user)
        assert action.difficulty == Difficulty.EASY

    def test_xp_must_be_positive(self, db, user):
        with pytest.raises(InvalidInputError):
            actions_svc.create_action(db, user, name="Nothing", block=Block.HOME, xp=0)

    def test_seed_defaults_is_idempotent(self, db, user):
        assert actions_svc.seed_default_actions(db, user) == 32
        assert actions_svc.seed_default_actions(db, user) == 0
        blocks = {a.block for a in actions_svc.list_actions(db, user)}
        assert len(blocks) == 8

    def test_other_users_action_not_found(self, db, user):
        from liferpg.services.users import create_user
        other = create_user(db, name="Other")
        action = _action(db, other)
        with pytest.raises(NotFoundError):
            actions_svc.log_action(db, user, action.id, today=TODAY)


class TestActionLog:
    def test_log_freezes_xp_and_credits(self, db, user):
        action = _action(db, user, xp=25)
        result = actions_svc.log_action(db, user, action.id, today=TODAY)
        actions_svc.update_action(db, user, action.id, {"xp": 99})

        assert result.xp_awarded == 25
        assert result.log.xp_awarded == 25
        assert user.total_xp == 25
        assert user.current_streak == 1
        assert user.last_active_date == TODAY

    def test_streak_moves_once_per_day(self, db, user):
        action = _action(db, user)
        actions_svc.log_action(db, user, action.id, today=TODAY)
        actions_svc.log_action(db, user, action.id, today=TODAY)
        assert user.current_streak == 1
        assert user.total_xp == 20

    def test_three_day_streak_pays_coins(self, db, user):
        action = _action(db, user)
        results = [
            actions_svc.log_action(db, user, action.id, today=TODAY + timedelta(days=i))
            for i in range(3)
        ]
        assert [r.coin_bonus for r in results] == [0, 0, 10]
        assert user.total_coins == 10
        assert user.longest_streak == 3

    def test_gap_resets_streak(self, db, user):
        action = _action(db, user)
        actions_svc.log_action(db, user, action.id, today=TODAY)
        actions_svc.log_action(db, user, action.id, today=TODAY + timedelta(days=1))
        actions_svc.log_action(db, user, action.id, today=TODAY + timedelta(days=5))
        assert user.current_streak == 1
        assert user.longest_streak == 2

    def test_delete_log_reverses_exact_xp(self, db, user):
        action = _action(db, user, xp=30)
        result = actions_svc.log_action(db, user, action.id, today=TODAY)
        assert actions_svc.delete_log(db, user, result.log.id) == 30
        assert user.total_xp == 0

    def test_list_logs_by_week(self, db, user):
        action = _action(db, user)
        actions_svc.log_action(db, user, action.id, today=TODAY)
        actions_svc.log_action(db, user, action.id, today=TODAY, day=MONDAY - timedelta(days=1))
        assert len(actions_svc.list_logs(db, user, week_start=MONDAY)) == 1
        assert len(actions_svc.list_logs(db, user, day=MONDAY - timedelta(days=1))) == 1


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

class TestHabits:
    def test_first_log_end_to_end(self, db, user):
        habit = habits_svc.create_habit(db, user, name="Read", block=Block.DEVELOPMENT, xp_per_log=15)
        result = habits_svc.log_habit(db, user, habit.id, TODAY)
        db.refresh(habit)

        assert result.created
        assert result.xp_awarded == 17
        assert habit.total_logs == 1
        assert habit.level == 1
        assert user.total_xp == 17

    def test_relog_same_day_is_noop(self, db, user):
        habit = habits_svc.create_habit(db, user, name="Read", block=Block.DEVELOPMENT)
        habits_svc.log_habit(db, user, habit.id, TODAY)
        again = habits_svc.log_habit(db, user, habit.id, TODAY)
        assert not again.created
        assert again.xp_awarded == 0
        assert user.total_xp == 11

    def test_unlog_restores_exact_xp(self, db, user):
        habit = habits_svc.create_habit(db, user, name="Run", block=Block.HEALTH, xp_per_log=10)
        for i in range(6):
            habits_svc.log_habit(db, user, habit.id, TODAY - timedelta(days=6 - i))
        before = user.total_xp

        seventh = habits_svc.log_habit(db, user, habit.id, TODAY)
        assert seventh.level == 2
        assert seventh.xp_awarded == 12

        undone = habits_svc.unlog_habit(db, user, habit.id, TODAY)
        db.refresh(habit)
        assert undone.xp_reversed == 12
        assert user.total_xp == before
        assert habit.total_logs == 6
        assert habit.level == 1

    def test_streaks_recomputed(self, db, user):
        habit = habits_svc.create_habit(db, user, name="Pray", block=Block.SPIRITUALITY)
        for offset in (0, 1, 2, 5):
            habits_svc.log_habit(db, user, habit.id, TODAY + timedelta(days=offset))
        db.refresh(habit)
        assert habit.current_streak == 1
        assert habit.longest_streak == 3

    def test_custom_days_validated(self, db, user):
        with pytest.raises(InvalidInputError):
            habits_svc.create_habit(db, user, name="x", block=Block.HOME, custom_days=[0, 7])

    def test_unknown_habit(self, db, user):
        with pytest.raises(NotFoundError):
            habits_svc.log_habit(db, user, 999_999, TODAY)


# ---------------------------------------------------------------------------
# Kanban
# ---------------------------------------------------------------------------

class TestKanban:
    def test_done_awards_once(self, db, user):
        task = _task(db, user)
        result = kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        assert result.xp_awarded == 13
        assert result.task.xp_awarded == 13
        assert result.task.completed_day == TODAY
        assert user.total_xp == 13

        again = kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        assert again.xp_awarded == 0
        assert user.total_xp == 13

    def test_ratings_in_same_update_are_used(self, db, user):
        task = _task(db, user)
        result = kanban_svc.update_task(
            db, user, task.id,
            {"status": KanbanStatus.DONE, "importance": 10, "discomfort": 10, "urgency": 10},
            now=NOW, today=TODAY,
        )
        assert result.xp_awarded == 100

    def test_editing_done_task_keeps_frozen_xp(self, db, user):
        task = _task(db, user, importance=2, discomfort=5, urgency=5)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        result = kanban_svc.update_task(db, user, task.id, {"importance": 10}, now=NOW, today=TODAY)
        assert result.task.xp_awarded == 5
        assert user.total_xp == 5

    def test_reopen_and_close_does_not_pay_twice(self, db, user):
        task = _task(db, user)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.TODO}, now=NOW, today=TODAY)
        result = kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        assert result.xp_awarded == 0
        assert user.total_xp == 13

    def test_reopened_task_stays_in_its_first_week(self, db, user):
        task = _task(db, user, block=Block.WORK)
        next_week = TODAY + timedelta(days=7)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.TODO}, now=NOW, today=next_week)
        result = kanban_svc.update_task(
            db, user, task.id, {"status": KanbanStatus.DONE},
            now=NOW + timedelta(days=7), today=next_week,
        )
        assert result.task.completed_day == TODAY
        assert weekly_report(db, user, MONDAY).total_xp == 13
        assert weekly_report(db, user, MONDAY + timedelta(days=7)).total_xp == 0

    def test_invalid_rating_changes_nothing(self, db, user):
        task = _task(db, user)
        with pytest.raises(InvalidInputError):
            kanban_svc.update_task(
                db, user, task.id, {"status": KanbanStatus.DONE, "urgency": 11}, now=NOW, today=TODAY,
            )
        db.rollback()
        db.refresh(task)
        assert task.status == KanbanStatus.TODO
        assert user.total_xp == 0

    def test_main_task_upserts_checkin(self, db, user):
        task = _task(db, user, is_main_task=True, main_task_date=TODAY)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        checkin = db.query(DailyCheckin).filter(DailyCheckin.user_id == user.id).one()
        assert checkin.day == TODAY
        assert checkin.main_task_done
        assert checkin.xp_earned == 13

    def test_archived_hidden_from_board(self, db, user):
        _task(db, user, title="visible")
        _task(db, user, title="gone", status=KanbanStatus.ARCHIVED)
        assert [t.title for t in kanban_svc.list_tasks(db, user)] == ["visible"]


# ---------------------------------------------------------------------------
# Energy log
# ---------------------------------------------------------------------------

def _past_day(db, user, days_ago: int, current_energy: int, **kw):
    db.add(EnergyLog(
        user_id=user.id,
        day=TODAY - timedelta(days=days_ago),
        current_energy=current_energy,
        base_energy=kw.pop("base_energy", 100),
        **kw,
    ))
    db.commit()


class TestEnergyLog:
    def test_today_created_lazily(self, db, user):
        log = energy_svc.get_today(db, user, TODAY)
        assert log.current_energy == 100
        assert log.base_energy == 100
        assert not log.morning_done
        assert not log.is_burnout
        assert energy_svc.get_today(db, user, TODAY).id == log.id

    def test_first_row_of_the_day_created_concurrently(self, db, user, monkeypatch):
        real_detect = energy_svc.economy.detect_burnout
        raced = []

        def detect_after_other_writer(prior):
            # Another request creates today's row between our lookup and insert.
            if not raced:
                raced.append(True)
                with Session(bind=db.get_bind()) as other:
                    energy_svc.spend_energy(other, other.get(User, user.id), TODAY, 10)
            return real_detect(prior)

        monkeypatch.setattr(energy_svc.economy, "detect_burnout", detect_after_other_writer)
        change = energy_svc.spend_energy(db, user, TODAY, 20)

        assert raced
        assert change.log.spent_total == 30
        assert change.log.current_energy == 70
        rows = db.query(EnergyLog).filter(EnergyLog.user_id == user.id, EnergyLog.day == TODAY).all()
        assert len(rows) == 1

    def test_burnout_after_three_overdraft_days(self, db, user):
        for days_ago in (1, 2, 3):
            _past_day(db, user, days_ago, current_energy=-5)
        log = energy_svc.submit_morning(db, user, TODAY, 100, 100, 100)
        assert log.is_burnout
        assert log.base_energy == 50

    def test_burnout_is_sticky_for_the_day(self, db, user):
        for days_ago in (1, 2, 3):
            _past_day(db, user, days_ago, current_energy=-5)
        energy_svc.get_today(db, user, TODAY)
        db.query(EnergyLog).filter(
            EnergyLog.user_id == user.id, EnergyLog.day == TODAY - timedelta(days=1)
        ).update({"current_energy": 50})
        db.commit()
        assert energy_svc.get_today(db, user, TODAY).is_burnout

    def test_morning_streak_bonus(self, db, user):
        for days_ago in (1, 2, 3):
            _past_day(db, user, days_ago, current_energy=40, morning_done=True, sleep_score=60)
        log = energy_svc.submit_morning(db, user, TODAY, 80, 50, 60)
        assert log.base_energy == 65
        assert log.streak_bonus == 10
        assert log.current_energy == 75

    def test_morning_after_spend_keeps_it(self, db, user):
        energy_svc.spend_energy(db, user, TODAY, 30)
        log = energy_svc.submit_morning(db, user, TODAY, 50, 50, 50)
        assert log.current_energy == 50 - 30
        assert log.spent_total == 30

    def test_overdraft_spend(self, db, user):
        energy_svc.spend_energy(db, user, TODAY, 100)
        energy_svc.spend_energy(db, user, TODAY, 1)
        change = energy_svc.spend_energy(db, user, TODAY, 10)
        assert change.applied == 15
        assert change.log.current_energy == -16

    def test_recovery_quota_has_no_side_effect(self, db, user):
        energy_svc.spend_energy(db, user, TODAY, 50)
        energy_svc.recover_energy(db, user, TODAY, "POWER_NAP")
        with pytest.raises(RecoveryLimitReachedError):
            energy_svc.recover_energy(db, user, TODAY, "POWER_NAP")
        db.rollback()
        log = energy_svc.get_today(db, user, TODAY)
        assert log.current_energy == 62
        assert log.recovered_total == 12
        assert len(log.events) == 2

    def test_recovery_capped_at_ceiling(self, db, user):
        change = energy_svc.recover_energy(db, user, TODAY, "WALK")
        assert change.applied == 0
        assert change.log.current_energy == 100

    def test_snapshot_matches_replay(self, db, user):
        energy_svc.spend_energy(db, user, TODAY, 35)
        energy_svc.recover_energy(db, user, TODAY, "TEA_BREAK")
        energy_svc.submit_morning(db, user, TODAY, 70, 70, 70)
        log = energy_svc.get_today(db, user, TODAY)
        day = energy_svc.current_day(log)
        assert day.current_energy == log.current_energy == 70 + 5 - 35
        assert day.spent_total == log.spent_total

    def test_resolve_cost(self):
        assert energy_svc.resolve_cost(amount=7) == 7
        assert energy_svc.resolve_cost(difficulty="HARD") == 20
        assert energy_svc.resolve_cost(importance=8, discomfort=8, urgency=8) == 35
        with pytest.raises(InvalidInputError):
            energy_svc.resolve_cost()

    def test_history_stats(self, db, user):
        _past_day(db, user, 1, current_energy=-10, morning_done=True, sleep_score=40, physical_score=50, mental_score=60)
        _past_day(db, user, 2, current_energy=60, morning_done=True, sleep_score=80, physical_score=70, mental_score=60)
        _past_day(db, user, 10, current_energy=90)
        energy_svc.get_today(db, user, TODAY)

        history = energy_svc.get_history(db, user, TODAY, range_days=7)
        stats = history["stats"]
        assert [l.day for l in history["logs"]] == [TODAY - timedelta(days=2), TODAY - timedelta(days=1), TODAY]
        assert stats["total_days"] == 3
        assert stats["avg_energy"] == 50
        assert stats["overdraft_days"] == 1
        assert stats["avg_sleep"] == 60

    def test_recovery_catalog_usage(self, db, user):
        energy_svc.spend_energy(db, user, TODAY, 40)
        energy_svc.recover_energy(db, user, TODAY, "TEA_BREAK")
        catalog = {c["type"]: c for c in energy_svc.recovery_catalog(db, user, TODAY)}
        assert catalog["TEA_BREAK"]["used_today"] == 1
        assert catalog["TEA_BREAK"]["remaining"] == 2
        assert catalog["MUSIC"]["remaining"] is None


# ---------------------------------------------------------------------------
# Rewards / check-ins
# ---------------------------------------------------------------------------

class TestRewards:
    def test_insufficient_coins(self, db, user):
        reward = rewards_svc.create_reward(db, user, name="Movie night", coin_cost=50)
        with pytest.raises(InsufficientCoinsError) as exc:
            rewards_svc.redeem_reward(db, user, reward.id, now=NOW)
        assert exc.value.details == {"required": 50, "available": 0}

    def test_redeem_debits_coins(self, db, user):
        user.total_coins = 80
        db.commit()
        reward = rewards_svc.create_reward(db, user, name="Cake", coin_cost=30)
        redeemed = rewards_svc.redeem_reward(db, user, reward.id, now=NOW)
        assert redeemed.is_redeemed
        assert user.total_coins == 50

    def test_redeemed_cannot_be_deleted_or_redeemed_again(self, db, user):
        user.total_coins = 100
        db.commit()
        reward = rewards_svc.create_reward(db, user, name="Book", coin_cost=10)
        rewards_svc.redeem_reward(db, user, reward.id, now=NOW)
        with pytest.raises(InvalidInputError):
            rewards_svc.redeem_reward(db, user, reward.id, now=NOW)
        with pytest.raises(InvalidInputError):
            rewards_svc.delete_reward(db, user, reward.id)


class TestCheckins:
    def test_upsert_overwrites(self, db, user):
        upsert_checkin(db, user, TODAY, {"mood_level": 2, "note": "meh"})
        checkin = upsert_checkin(db, user, TODAY, {"mood_level": 4})
        assert checkin.mood_level == 4
        assert checkin.note == "meh"
        assert len(list_checkins(db, user, TODAY)) == 1

    def test_range(self, db, user):
        upsert_checkin(db, user, TODAY - timedelta(days=100), {"mood_level": 3})
        upsert_checkin(db, user, TODAY, {"mood_level": 3})
        assert len(list_checkins(db, user, TODAY, range_days=90)) == 1

    def test_first_checkin_of_the_day_created_concurrently(self, db, user, monkeypatch):
        real_get = checkins_svc._get
        raced = []

        def get_after_other_writer(session, player, day):
            found = real_get(session, player, day)
            if not raced:
                raced.append(True)
                with Session(bind=db.get_bind()) as other:
                    upsert_checkin(other, other.get(User, user.id), day, {"note": "first"})
            return found

        monkeypatch.setattr(checkins_svc, "_get", get_after_other_writer)
        checkin = upsert_checkin(db, user, TODAY, {"mood_level": 4})

        assert raced
        assert checkin.note == "first"
        assert checkin.mood_level == 4
        assert len(list_checkins(db, user, TODAY)) == 1


# ---------------------------------------------------------------------------
# Weekly
# ---------------------------------------------------------------------------

class TestWeekly:
    def test_block_totals_and_trend(self, db, user):
        health = _action(db, user, xp=60, block=Block.HEALTH)
        work = _action(db, user, xp=30, block=Block.WORK)
        actions_svc.log_action(db, user, health.id, today=TODAY)
        actions_svc.log_action(db, user, health.id, today=TODAY)
        actions_svc.log_action(db, user, work.id, today=TODAY, day=MONDAY - timedelta(days=3))

        task = _task(db, user, block=Block.WORK)
        kanban_svc.update_task(db, user, task.id, {"status": KanbanStatus.DONE}, now=NOW, today=TODAY)
        _task(db, user, title="no block")

        report = weekly_report(db, user, MONDAY)
        blocks = {b.block: b for b in report.blocks}

        assert blocks["HEALTH"].xp == 120
        assert blocks["HEALTH"].percentage == 100
        assert blocks["HEALTH"].trend == "up"
        assert blocks["WORK"].xp == 13
        assert blocks["WORK"].percentage == 11
        assert blocks["WORK"].trend == "down"
        assert blocks["HOME"].trend == "same"
        assert report.total_xp == 133

    def test_week_must_start_monday(self, db, user):
        with pytest.raises(InvalidInputError):
            weekly_report(db, user, TODAY)
