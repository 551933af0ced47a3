"""
Shared fixtures for the test suite.
"""

import json
import os
import tempfile
from pathlib import Path

# Point the app at a throwaway database and the bundled snapshot before it is imported
_TMP_DIR = tempfile.mkdtemp(prefix="leaguesim-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ.setdefault("LEAGUESIM_NUM_SIMULATIONS", "100")
os.environ.setdefault("LEAGUESIM_DATA_DIR", str(Path(__file__).resolve().parents[2] / "data"))

import pytest

from leaguesim.simulator import Fixture, LeagueTable


@pytest.fixture
def small_table() -> LeagueTable:
    """Four-team table with Liverpool clear at the top."""
    table = LeagueTable()
    table.add_team("Liverpool", 67, 40)
    table.add_team("Arsenal", 54, 28)
    table.add_team("Nottingham Forest", 48, 18)
    table.add_team("Manchester City", 47, 16)
    return table


@pytest.fixture
def small_fixtures():
    """Every pairing of the four-team table, home and away."""
    names = ["Liverpool", "Arsenal", "Nottingham Forest", "Manchester City"]
    return [Fixture(home, away) for home in names for away in names if home != away]


@pytest.fixture
def write_snapshot(tmp_path):
    """Write standings/fixtures JSON into a temp dir and return the dir."""
    def _write(standings, fixtures, raw_standings=None, raw_fixtures=None) -> Path:
        (tmp_path / "standings.json").write_text(
            raw_standings if raw_standings is not None else json.dumps(standings)
        )
        (tmp_path / "fixtures.json").write_text(
            raw_fixtures if raw_fixtures is not None else json.dumps(fixtures)
        )
        return tmp_path

    return _write
