"""
Snapshot data loading.
"""

from .loader import (
    LeagueSnapshot,
    DataFileError,
    StandingRow,
    FixtureRow,
    read_standings,
    read_fixtures,
    load_snapshot,
    LEAGUE_SIZE,
    MAX_FIXTURES,
)

__all__ = [
    "LeagueSnapshot",
    "DataFileError",
    "StandingRow",
    "FixtureRow",
    "read_standings",
    "read_fixtures",
    "load_snapshot",
    "LEAGUE_SIZE",
    "MAX_FIXTURES",
]
