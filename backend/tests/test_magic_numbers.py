"""
Tests for clinch and elimination checks.
"""

from pathlib import Path

import pytest

from leaguesim.data import load_snapshot
from leaguesim.simulator import (
    Fixture,
    InvalidRankError,
    LeagueTable,
    calculate_magic_number,
    games_remaining,
    max_points,
)


@pytest.fixture
def table():
    table = LeagueTable()
    table.add_team("Liverpool", 80, 40)
    table.add_team("Arsenal", 70, 20)
    table.add_team("Chelsea", 60, 10)
    table.add_team("Everton", 30, -70)
    return table


@pytest.fixture
def fixtures():
    return [
        Fixture("Liverpool", "Arsenal"),
        Fixture("Chelsea", "Everton"),
        Fixture("Arsenal", "Chelsea"),
        Fixture("Everton", "Liverpool"),
    ]


class TestHelpers:

    def test_games_remaining(self, fixtures):
        counts = games_remaining(fixtures)
        assert counts == {"Liverpool": 2, "Arsenal": 2, "Chelsea": 2, "Everton": 2}

    def test_max_points(self, table, fixtures):
        assert max_points(table, fixtures) == {
            "Liverpool": 86, "Arsenal": 76, "Chelsea": 66, "Everton": 36
        }


class TestCalculateMagicNumber:
    """Tests for calculate_magic_number."""

    def test_clinched(self, table, fixtures):
        # Nobody else can reach 80
        result = calculate_magic_number("Liverpool", 1, table, fixtures)
        assert result.clinched is True
        assert result.magic is None

    def test_clinched_with_rivals_level_below(self, table, fixtures):
        # Chelsea can reach 66 at most, Arsenal already has 70
        result = calculate_magic_number("Arsenal", 2, table, fixtures)
        assert result.clinched is True
        assert result.eliminated is False

    def test_magic_number(self, fixtures):
        table = LeagueTable()
        table.add_team("Liverpool", 80, 40)
        table.add_team("Arsenal", 75, 20)
        table.add_team("Chelsea", 60, 10)
        table.add_team("Everton", 30, -70)

        # Arsenal can reach 81, so Liverpool needs 82
        result = calculate_magic_number("Liverpool", 1, table, fixtures)
        assert result.clinched is False
        assert result.eliminated is False
        assert result.magic == 2

    def test_out_of_reach_leader(self, table, fixtures):
        # Liverpool already has more than Arsenal can reach
        result = calculate_magic_number("Arsenal", 1, table, fixtures)
        assert result.eliminated is True
        assert result.magic is None

    def test_eliminated(self, table, fixtures):
        result = calculate_magic_number("Everton", 3, table, fixtures)
        assert result.eliminated is True
        assert result.clinched is False

    def test_last_place_always_clinched(self, table, fixtures):
        assert calculate_magic_number("Everton", 4, table, fixtures).clinched is True

    def test_invalid_rank(self, table, fixtures):
        with pytest.raises(InvalidRankError):
            calculate_magic_number("Everton", 5, table, fixtures)

    def test_bundled_snapshot(self):
        snapshot = load_snapshot(Path(__file__).resolve().parents[2] / "data")

        # Liverpool 70 with 9 to play; Arsenal can reach 85
        title = calculate_magic_number("Liverpool", 1, snapshot.table, snapshot.fixtures)
        assert title.magic == 16

        # Thirteen teams already sit above Southampton's 36-point ceiling
        assert calculate_magic_number("Southampton", 13, snapshot.table, snapshot.fixtures).eliminated
        assert not calculate_magic_number("Southampton", 14, snapshot.table, snapshot.fixtures).eliminated
