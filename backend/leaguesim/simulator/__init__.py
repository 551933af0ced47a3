"""
Premier League Season Simulator

Monte Carlo simulation of the remaining fixtures to estimate finishing positions.
"""

from .models import (
    Team,
    Fixture,
    LeagueTable,
    SimulationSummary,
    H2HDict,
    SimulationError,
    UnknownTeamError,
    InvalidRankError,
)
from .engine import (
    sample_score,
    simulate_season,
    run_simulation,
    validate_inputs,
    calculate_results,
    calculate_probability,
)
from .tiebreakers import rank_teams, resolve_tiebreaker, get_h2h_record
from .magic_numbers import MagicNumber, calculate_magic_number, games_remaining, max_points

__all__ = [
    # Models
    "Team",
    "Fixture",
    "LeagueTable",
    "SimulationSummary",
    "H2HDict",
    # Errors
    "SimulationError",
    "UnknownTeamError",
    "InvalidRankError",
    # Engine
    "sample_score",
    "simulate_season",
    "run_simulation",
    "validate_inputs",
    "calculate_results",
    "calculate_probability",
    # Tiebreakers
    "rank_teams",
    "resolve_tiebreaker",
    "get_h2h_record",
    # Magic numbers
    "MagicNumber",
    "calculate_magic_number",
    "games_remaining",
    "max_points",
]
