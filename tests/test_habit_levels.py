"""
Tests for the habit level curve and streak lengths.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from liferpg.core.errors import InvalidInputError
from liferpg.services.habit_levels import habit_level, habit_xp_award, streak_lengths


class TestHabitLevel:
    @pytest.mark.parametrize(
        "completions,level",
        [(0, 1), (6, 1), (7, 2), (20, 2), (21, 3), (49, 3), (50, 4),
         (99, 4), (100, 5), (199, 5), (200, 6), (364, 6), (365, 7), (10000, 7)],
    )
    def test_band_boundaries(self, completions, level):
        assert habit_level(completions).level == level

    def test_titles(self):
        assert habit_level(0).title == "Beginner"
        assert habit_level(365).title == "Legend"

    def test_multiplier(self):
        assert habit_level(0).xp_multiplier == Decimal("1.1")
        assert habit_level(400).xp_multiplier == Decimal("1.7")

    def test_progress_within_band(self):
        assert habit_level(7).progress == 0
        assert habit_level(14).progress == pytest.approx(7 / 14)

    def test_open_band_progress_is_one(self):
        assert habit_level(365).progress == 1.0

    def test_negative_rejected(self):
        with pytest.raises(InvalidInputError):
            habit_level(-1)


class TestHabitXpAward:
    def test_first_log(self):
        assert habit_xp_award(15, 1) == 17   # 16.5 rounds up

    def test_multiplier_uses_level_after_log(self):
        # the 7th log reaches level 2 and is paid at 1.2x
        assert habit_xp_award(10, 6) == 11
        assert habit_xp_award(10, 7) == 12


class TestStreakLengths:
    def test_empty(self):
        assert streak_lengths([]) == (0, 0)

    def test_consecutive(self):
        start = date(2026, 3, 1)
        assert streak_lengths([start + timedelta(days=i) for i in range(4)]) == (4, 4)

    def test_gap_resets_current(self):
        days = [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 10)]
        assert streak_lengths(days) == (1, 3)

    def test_duplicates_and_order_ignored(self):
        days = [date(2026, 3, 2), date(2026, 3, 1), date(2026, 3, 2)]
        assert streak_lengths(days) == (2, 2)
