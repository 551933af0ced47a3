"""
Pydantic schemas for API request/response validation.
"""

from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel, Field

from ..core.config import DEFAULT_SIMULATIONS, MAX_SIMULATIONS, NUM_SIM_WORKERS


# ============== League Schemas ==============

class StandingResponse(BaseModel):
    """One row of the current table."""
    rank: int
    name: str
    pts: int
    goal_diff: int
    goals_for: int
    wins: int
    played: int


class FixtureResponse(BaseModel):
    """A remaining fixture."""
    home: str
    away: str


class MagicNumberResponse(BaseModel):
    """Clinch/elimination status for a team and rank."""
    team: str
    target_rank: int
    clinched: bool
    eliminated: bool
    magic: Optional[int]


class LeagueResponse(BaseModel):
    """Loaded snapshot summary."""
    snapshot_id: str
    teams: List[StandingResponse]
    remaining_fixtures: int


# ============== Simulation Schemas ==============

class SimulationRunRequest(BaseModel):
    """Simulation request."""
    team: str = Field(..., min_length=1, max_length=100)
    rank: int = Field(..., ge=1)
    n_simulations: int = Field(default=DEFAULT_SIMULATIONS, ge=1, le=MAX_SIMULATIONS)
    n_workers: int = Field(default=NUM_SIM_WORKERS, ge=1, le=32)
    seed: Optional[int] = Field(default=None, ge=0, le=2**31 - 1)


class SimulationTaskResponse(BaseModel):
    """Simulation task status response."""
    task_id: str
    status: str  # pending, running, completed, failed
    progress: int  # 0-100
    error: Optional[str] = None


class SimulationResultsResponse(BaseModel):
    """Full simulation results response."""
    team: str
    target_rank: int
    n_simulations: int
    successes: int
    probability: float  # percent
    position_counts: Dict[str, int]
    position_probabilities: Dict[str, float]
    average_wins_at_rank: Optional[float]
    clinched: bool = False
    eliminated: bool = False
    magic_number: Optional[int] = None
    seed: Optional[int] = None
    snapshot_id: str
    cached: bool = False
    cached_at: Optional[datetime] = None

