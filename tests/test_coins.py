"""
Tests for the streak bonus table and the daily streak transition.
"""
from datetime import date

import pytest

from liferpg.core.errors import InvalidInputError
from liferpg.services.coins import advance_streak, streak_bonus

TODAY = date(2026, 5, 10)


class TestStreakBonus:
    @pytest.mark.parametrize(
        "days,coins", [(3, 10), (7, 30), (14, 75), (30, 200), (100, 500), (365, 2000)]
    )
    def test_thresholds(self, days, coins):
        assert streak_bonus(days) == coins

    @pytest.mark.parametrize("days", [1, 2, 4, 8, 29, 366])
    def test_exact_match_only(self, days):
        assert streak_bonus(days) is None

    @pytest.mark.parametrize("days", [0, -3, 2.0])
    def test_invalid(self, days):
        with pytest.raises(InvalidInputError):
            streak_bonus(days)


class TestAdvanceStreak:
    def test_first_ever_action(self):
        update = advance_streak(None, TODAY, 0)
        assert update.streak == 1
        assert update.is_new_day
        assert update.coin_bonus == 0

    def test_yesterday_increments(self):
        update = advance_streak(date(2026, 5, 9), TODAY, 4)
        assert update.streak == 5

    def test_gap_resets(self):
        update = advance_streak(date(2026, 5, 7), TODAY, 20)
        assert update.streak == 1

    def test_same_day_is_idempotent(self):
        update = advance_streak(TODAY, TODAY, 6)
        assert update.streak == 6
        assert update.coin_bonus == 0
        assert not update.is_new_day

    def test_bonus_on_threshold_day(self):
        update = advance_streak(date(2026, 5, 9), TODAY, 6)
        assert update.streak == 7
        assert update.coin_bonus == 30
