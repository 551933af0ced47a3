"""
Loader for the hand-typed JSON snapshots of standings and fixtures.

standings.json is an array of team records:
    [{"name": "Liverpool", "pts": 70, "goal_diff": 42, "goals_for": 69, "wins": 21, "played": 29}, ...]

fixtures.json is an array of remaining fixtures:
    [{"home": "Liverpool", "away": "Everton"}, ...]
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..simulator.models import Fixture, LeagueTable, Team
from ..core.config import DATA_DIR, STANDINGS_FILE, FIXTURES_FILE


logger = logging.getLogger(__name__)

LEAGUE_SIZE = 20
MAX_FIXTURES = 380

PathLike = Union[str, Path]


class DataFileError(Exception):
    """Raised when a snapshot file is missing or malformed."""
    pass


class StandingRow(BaseModel):
    """One team entry in standings.json."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    pts: int = Field(..., ge=0)
    goal_diff: int
    goals_for: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    played: int = Field(default=0, ge=0)


class FixtureRow(BaseModel):
    """One entry in fixtures.json."""
    model_config = ConfigDict(str_strip_whitespace=True)

    home: str = Field(..., min_length=1)
    away: str = Field(..., min_length=1)


_standings_adapter = TypeAdapter(List[StandingRow])
_fixtures_adapter = TypeAdapter(List[FixtureRow])


@dataclass
class LeagueSnapshot:
    """Current standings plus remaining fixtures, loaded once at startup."""

    table: LeagueTable
    fixtures: List[Fixture]
    snapshot_id: str


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise DataFileError(f"Could not read {path}: {e}")


def _parse(path: Path, raw: bytes, adapter: TypeAdapter) -> list:
    try:
        return adapter.validate_python(json.loads(raw))
    except json.JSONDecodeError as e:
        raise DataFileError(f"{path} is not valid JSON: {e}")
    except ValidationError as e:
        raise DataFileError(f"{path} is not correctly formatted: {e}")


def _build_table(path: Path, rows: List[StandingRow]) -> LeagueTable:
    if len(rows) < 2:
        raise DataFileError(f"{path} must list at least two teams")

    table = LeagueTable()
    for row in rows:
        if row.name in table:
            raise DataFileError(f"{path} lists {row.name} more than once")
        table.add_team_struct(Team(**row.model_dump()))

    if len(table) != LEAGUE_SIZE:
        logger.warning("%s lists %d teams, expected %d", path, len(table), LEAGUE_SIZE)
    return table


def _build_fixtures(path: Path, rows: List[FixtureRow], table: Optional[LeagueTable]) -> List[Fixture]:
    if len(rows) > MAX_FIXTURES:
        raise DataFileError(f"{path} lists {len(rows)} fixtures, at most {MAX_FIXTURES} allowed")

    fixtures = []
    for i, row in enumerate(rows):
        if row.home == row.away:
            raise DataFileError(f"{path} entry {i}: {row.home} cannot play itself")
        if table is not None:
            for name in (row.home, row.away):
                if name not in table:
                    raise DataFileError(f"{path} entry {i}: unknown team {name}")
        fixtures.append(Fixture(home=row.home, away=row.away))
    return fixtures


def read_standings(path: PathLike) -> LeagueTable:
    """Read standings.json into a LeagueTable."""
    path = Path(path)
    rows = _parse(path, _read_bytes(path), _standings_adapter)
    table = _build_table(path, rows)
    logger.info("Loaded %d teams from %s", len(table), path)
    return table


def read_fixtures(path: PathLike, table: Optional[LeagueTable] = None) -> List[Fixture]:
    """
    Read fixtures.json into a list of fixtures.

    Args:
        path: Path to the fixtures file
        table: When given, every fixture must reference teams in this table
    """
    path = Path(path)
    rows = _parse(path, _read_bytes(path), _fixtures_adapter)
    fixtures = _build_fixtures(path, rows, table)
    logger.info("Loaded %d fixtures from %s", len(fixtures), path)
    return fixtures


def load_snapshot(
    data_dir: PathLike = DATA_DIR,
    standings_file: str = STANDINGS_FILE,
    fixtures_file: str = FIXTURES_FILE
) -> LeagueSnapshot:
    """
    Load and cross-check both snapshot files.

    The snapshot id is a short hash of both files' contents, so cached
    results are keyed to the data they were computed from.
    """
    data_dir = Path(data_dir)
    standings_path = data_dir / standings_file
    fixtures_path = data_dir / fixtures_file

    standings_raw = _read_bytes(standings_path)
    fixtures_raw = _read_bytes(fixtures_path)

    table = _build_table(standings_path, _parse(standings_path, standings_raw, _standings_adapter))
    fixtures = _build_fixtures(
        fixtures_path, _parse(fixtures_path, fixtures_raw, _fixtures_adapter), table
    )

    digest = hashlib.sha256(standings_raw + b"\0" + fixtures_raw).hexdigest()[:16]
    logger.info(
        "Loaded snapshot %s: %d teams, %d remaining fixtures from %s",
        digest, len(table), len(fixtures), data_dir
    )
    return LeagueSnapshot(table=table, fixtures=fixtures, snapshot_id=digest)
