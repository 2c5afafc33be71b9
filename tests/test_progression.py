"""
Tests for the level curve, avatar stages and kanban scoring.
"""
import pytest

from liferpg.core.errors import InvalidInputError
from liferpg.services.progression import (
    BASE_XP,
    MAX_LEVEL,
    avatar_stage,
    avatar_title,
    kanban_xp,
    level_of,
    round_half_up,
    validate_rating,
)


class TestLevelOf:
    def test_zero_xp_is_level_one(self):
        info = level_of(0)
        assert info.level == 1
        assert info.current_xp == 0
        assert info.next_level_xp == 550
        assert info.progress == 0

    def test_level_two_boundary(self):
        assert level_of(549).level == 1
        assert level_of(550).level == 2

    def test_exact_boundary_starts_new_level_at_zero_progress(self):
        info = level_of(550)
        assert info.current_xp == 0
        assert info.progress == 0
        assert info.next_level_xp == 1100

    def test_level_three_boundary(self):
        assert level_of(550 + 1100 - 1).level == 2
        assert level_of(550 + 1100).level == 3

    def test_progress_inside_level(self):
        info = level_of(550 + 550)
        assert info.level == 2
        assert info.current_xp == 550
        assert info.progress == pytest.approx(0.5)

    def test_max_level_is_terminal(self):
        total_to_max = sum(BASE_XP * l for l in range(1, MAX_LEVEL))
        assert level_of(total_to_max - 1).level == MAX_LEVEL - 1
        info = level_of(total_to_max)
        assert info.level == MAX_LEVEL
        assert info.next_level_xp == 0
        assert info.progress == 1.0
        assert level_of(10_000_000).level == MAX_LEVEL

    def test_monotonic(self):
        previous = 0
        for xp in range(0, 200_000, 777):
            level = level_of(xp).level
            assert level >= previous
            previous = level

    def test_progress_below_one_before_max(self):
        for xp in (0, 1, 549, 550, 12345, 150000):
            info = level_of(xp)
            if info.level < MAX_LEVEL:
                assert 0 <= info.progress < 1

    @pytest.mark.parametrize("bad", [-1, 1.5, "100", None, True])
    def test_invalid_xp_rejected(self, bad):
        with pytest.raises(InvalidInputError):
            level_of(bad)


class TestAvatar:
    def test_stage_mirrors_level(self):
        assert avatar_stage(1) == 1
        assert avatar_stage(25) == 25

    def test_stage_capped(self):
        assert avatar_stage(30) == 25

    def test_titles(self):
        assert avatar_title(1) == "Seedling"
        assert avatar_title(25) == "Apex"


class TestKanbanXp:
    def test_max(self):
        assert kanban_xp(10, 10, 10) == 100

    def test_min_rounds_to_zero(self):
        assert kanban_xp(1, 1, 1) == 0

    def test_half_rounds_up(self):
        assert kanban_xp(5, 5, 5) == 13

    def test_general(self):
        assert kanban_xp(7, 3, 4) == 8   # 8.4
        assert kanban_xp(3, 3, 5) == 5   # 4.5

    @pytest.mark.parametrize("ratings", [(0, 5, 5), (5, 11, 5), (5, 5, -1), (5, "5", 5)])
    def test_out_of_range_rejected(self, ratings):
        with pytest.raises(InvalidInputError) as exc:
            kanban_xp(*ratings)
        assert exc.value.code == "INVALID_INPUT"


class TestHelpers:
    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2

    def test_validate_rating_returns_value(self):
        assert validate_rating(7, "urgency") == 7

    def test_validate_rating_names_field(self):
        with pytest.raises(InvalidInputError) as exc:
            validate_rating(12, "urgency")
        assert exc.value.details == {"field": "urgency"}
