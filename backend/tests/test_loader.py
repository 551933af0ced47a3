"""
Tests for reading the standings and fixtures snapshots.
"""

from collections import Counter
from pathlib import Path

import pytest

from leaguesim.data import (
    DataFileError,
    load_snapshot,
    read_fixtures,
    read_standings,
    MAX_FIXTURES,
)


REPO_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

STANDINGS = [
    {"name": "Liverpool", "pts": 67, "goal_diff": 40, "wins": 20},
    {"name": "Arsenal", "pts": 54, "goal_diff": 28},
    {"name": "Chelsea", "pts": 49, "goal_diff": 17, "goals_for": 53},
]
FIXTURES = [
    {"home": "Liverpool", "away": "Arsenal"},
    {"home": "Chelsea", "away": "Liverpool"},
]


class TestBundledSnapshot:
    """Checks on the data files shipped with the repo."""

    def test_reads_twenty_teams(self):
        table = read_standings(REPO_DATA_DIR / "standings.json")
        assert len(table) == 20
        assert table.ranked()[0].name == "Liverpool"

    def test_records_are_consistent(self):
        table = read_standings(REPO_DATA_DIR / "standings.json")
        assert sum(t.goal_diff for t in table) == 0
        for team in table:
            assert team.wins * 3 <= team.pts
            assert team.played == 29

    def test_fixtures_are_balanced(self):
        table = read_standings(REPO_DATA_DIR / "standings.json")
        fixtures = read_fixtures(REPO_DATA_DIR / "fixtures.json", table)
        games = Counter()
        for fixture in fixtures:
            games[fixture.home] += 1
            games[fixture.away] += 1
        assert len(fixtures) == 90
        assert set(games.values()) == {9}

    def test_load_snapshot(self):
        snapshot = load_snapshot(REPO_DATA_DIR)
        assert len(snapshot.table) == 20
        assert len(snapshot.fixtures) == 90
        assert len(snapshot.snapshot_id) == 16


class TestLoadSnapshot:
    """Tests for load_snapshot validation."""

    def test_optional_fields_default_to_zero(self, write_snapshot):
        snapshot = load_snapshot(write_snapshot(STANDINGS, FIXTURES))
        arsenal = snapshot.table.get("Arsenal")
        assert arsenal.wins == 0
        assert arsenal.goals_for == 0
        assert snapshot.table.get("Liverpool").wins == 20
        assert snapshot.table.get("Chelsea").goals_for == 53

    def test_fixture_order_preserved(self, write_snapshot):
        snapshot = load_snapshot(write_snapshot(STANDINGS, FIXTURES))
        assert [(f.home, f.away) for f in snapshot.fixtures] == [
            ("Liverpool", "Arsenal"), ("Chelsea", "Liverpool")
        ]

    def test_snapshot_id_tracks_content(self, write_snapshot):
        first = load_snapshot(write_snapshot(STANDINGS, FIXTURES)).snapshot_id
        again = load_snapshot(write_snapshot(STANDINGS, FIXTURES)).snapshot_id
        changed = load_snapshot(write_snapshot(STANDINGS, FIXTURES[:1])).snapshot_id
        assert first == again
        assert first != changed

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFileError, match="Could not read"):
            load_snapshot(tmp_path)

    def test_invalid_json(self, write_snapshot):
        data_dir = write_snapshot(None, FIXTURES, raw_standings="[{not json")
        with pytest.raises(DataFileError, match="not valid JSON"):
            load_snapshot(data_dir)

    def test_missing_field(self, write_snapshot):
        standings = [{"name": "Liverpool", "pts": 67}, {"name": "Arsenal", "pts": 54, "goal_diff": 28}]
        with pytest.raises(DataFileError, match="not correctly formatted"):
            load_snapshot(write_snapshot(standings, []))

    def test_blank_team_name(self, write_snapshot):
        standings = STANDINGS + [{"name": "   ", "pts": 1, "goal_diff": 0}]
        with pytest.raises(DataFileError, match="not correctly formatted"):
            load_snapshot(write_snapshot(standings, FIXTURES))

    def test_names_are_trimmed(self, write_snapshot):
        standings = [dict(row) for row in STANDINGS]
        standings[0]["name"] = " Liverpool "
        snapshot = load_snapshot(write_snapshot(standings, FIXTURES))
        assert "Liverpool" in snapshot.table

    def test_negative_points(self, write_snapshot):
        standings = STANDINGS + [{"name": "Everton", "pts": -1, "goal_diff": 0}]
        with pytest.raises(DataFileError):
            load_snapshot(write_snapshot(standings, FIXTURES))

    def test_duplicate_team(self, write_snapshot):
        standings = STANDINGS + [{"name": "Arsenal", "pts": 1, "goal_diff": 0}]
        with pytest.raises(DataFileError, match="more than once"):
            load_snapshot(write_snapshot(standings, FIXTURES))

    def test_single_team_rejected(self, write_snapshot):
        with pytest.raises(DataFileError, match="at least two teams"):
            load_snapshot(write_snapshot(STANDINGS[:1], []))

    def test_unknown_team_in_fixtures(self, write_snapshot):
        fixtures = FIXTURES + [{"home": "Sunderland", "away": "Arsenal"}]
        with pytest.raises(DataFileError, match="unknown team Sunderland"):
            load_snapshot(write_snapshot(STANDINGS, fixtures))

    def test_team_playing_itself(self, write_snapshot):
        fixtures = [{"home": "Arsenal", "away": "Arsenal"}]
        with pytest.raises(DataFileError, match="cannot play itself"):
            load_snapshot(write_snapshot(STANDINGS, fixtures))

    def test_too_many_fixtures(self, write_snapshot):
        fixtures = [{"home": "Liverpool", "away": "Arsenal"}] * (MAX_FIXTURES + 1)
        with pytest.raises(DataFileError, match="at most"):
            load_snapshot(write_snapshot(STANDINGS, fixtures))

    def test_fixtures_without_table_skip_team_check(self, write_snapshot):
        data_dir = write_snapshot(STANDINGS, [{"home": "Sunderland", "away": "Leeds United"}])
        fixtures = read_fixtures(data_dir / "fixtures.json")
        assert fixtures[0].home == "Sunderland"
