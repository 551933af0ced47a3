"""
Data models for the league simulator.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional, Iterator


class SimulationError(Exception):
    """Base class for simulator errors."""
    pass


class UnknownTeamError(SimulationError, ValueError):
    """Raised when a team name is not present in the league table."""
    pass


class InvalidRankError(SimulationError, ValueError):
    """Raised when a target rank falls outside the league."""
    pass


@dataclass
class Team:
    """Represents a team's current league record."""

    name: str
    pts: int
    goal_diff: int
    goals_for: int = 0
    wins: int = 0
    played: int = 0

    def update(self, match_goal_diff: int, goals_scored: int = 0) -> None:
        """Apply a single result from this team's point of view."""
        self.goal_diff += match_goal_diff
        self.goals_for += goals_scored
        self.played += 1
        if match_goal_diff > 0:
            self.pts += 3
            self.wins += 1
        elif match_goal_diff == 0:
            self.pts += 1

    def copy(self) -> 'Team':
        """Create a copy of this team for simulation."""
        return Team(
            name=self.name,
            pts=self.pts,
            goal_diff=self.goal_diff,
            goals_for=self.goals_for,
            wins=self.wins,
            played=self.played
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "pts": self.pts,
            "goal_diff": self.goal_diff,
            "goals_for": self.goals_for,
            "wins": self.wins,
            "played": self.played
        }


@dataclass
class Fixture:
    """Represents a remaining fixture between two teams."""

    home: str
    away: str

    def __post_init__(self):
        if self.home == self.away:
            raise ValueError(f"A team cannot play itself: {self.home}")

    def to_dict(self) -> dict:
        return {"home": self.home, "away": self.away}


# Head-to-head records keyed by alphabetically ordered team names
H2HRecord = Tuple[int, int, int]  # (first_team_wins, second_team_wins, draws)
H2HDict = Dict[Tuple[str, str], H2HRecord]


class LeagueTable:
    """
    League standings keyed by team name.

    Head-to-head results are only tracked for fixtures applied through
    update(), i.e. the matches played inside a simulation.
    """

    def __init__(self, teams: Optional[List[Team]] = None):
        self._teams: Dict[str, Team] = {}
        self.h2h: H2HDict = {}
        for team in teams or []:
            self.add_team_struct(team)

    def __len__(self) -> int:
        return len(self._teams)

    def __contains__(self, name: object) -> bool:
        return name in self._teams

    def __iter__(self) -> Iterator[Team]:
        return iter(self._teams.values())

    @property
    def teams(self) -> List[Team]:
        return list(self._teams.values())

    @property
    def team_names(self) -> List[str]:
        return sorted(self._teams)

    def get(self, name: str) -> Team:
        """Get a team by name."""
        try:
            return self._teams[name]
        except KeyError:
            raise UnknownTeamError(f"Unknown team: {name}")

    def add_team(self, name: str, pts: int, goal_diff: int, goals_for: int = 0, wins: int = 0) -> Team:
        """Add a team, replacing any existing entry with the same name."""
        team = Team(name=name, pts=pts, goal_diff=goal_diff, goals_for=goals_for, wins=wins)
        self._teams[name] = team
        return team

    def add_team_struct(self, team: Team) -> None:
        self._teams[team.name] = team

    def update(self, fixture: Fixture, home_goals: int, away_goals: int) -> None:
        """
        Apply a match result to both teams.

        Args:
            fixture: The fixture that was played
            home_goals: Goals scored by the home side
            away_goals: Goals scored by the away side
        """
        home = self.get(fixture.home)
        away = self.get(fixture.away)
        goal_diff = home_goals - away_goals

        home.update(goal_diff, home_goals)
        away.update(-goal_diff, away_goals)

        first, second = sorted((fixture.home, fixture.away))
        record = list(self.h2h.get((first, second), (0, 0, 0)))
        if goal_diff == 0:
            record[2] += 1
        elif (goal_diff > 0) == (fixture.home == first):
            record[0] += 1
        else:
            record[1] += 1
        self.h2h[(first, second)] = tuple(record)

    def ranked(self) -> List[Team]:
        """Teams in final league order."""
        from .tiebreakers import rank_teams
        return rank_teams(self.teams, self.h2h)

    def find_final_rank_and_wins(self, desired_team: str) -> Tuple[int, int]:
        """
        Find where a team sits in the table.

        Returns:
            Tuple of (1-based rank, that team's wins)
        """
        target = self.get(desired_team)
        for rank, team in enumerate(self.ranked(), start=1):
            if team.name == target.name:
                return rank, team.wins
        raise UnknownTeamError(f"Unknown team: {desired_team}")

    def copy(self) -> 'LeagueTable':
        """Create an independent copy for simulation."""
        table = LeagueTable([t.copy() for t in self._teams.values()])
        table.h2h = dict(self.h2h)
        return table

    def format_table(self) -> str:
        """Render the table as plain text."""
        lines = [f"{'Rank':<6}{'Team':<26}{'Pld':>5}{'Pts':>6}{'GD':>6}"]
        for rank, team in enumerate(self.ranked(), start=1):
            lines.append(
                f"{rank:<6}{team.name:<26}{team.played:>5}{team.pts:>6}{team.goal_diff:>+6}"
            )
        return "\n".join(lines)

    def to_list(self) -> List[dict]:
        """Ranked table for JSON serialization."""
        return [
            {"rank": rank, **team.to_dict()}
            for rank, team in enumerate(self.ranked(), start=1)
        ]


@dataclass
class SimulationSummary:
    """Aggregated results from a Monte Carlo run for one team."""

    team: str
    target_rank: int
    n_simulations: int
    successes: int = 0
    position_counts: Dict[int, int] = field(default_factory=dict)
    wins_at_rank_total: int = 0
    finishes_at_rank: int = 0
    seed: Optional[int] = None

    @property
    def probability(self) -> float:
        """Percent chance of finishing at the target rank or better."""
        if self.n_simulations == 0:
            return 0.0
        return self.successes / self.n_simulations * 100.0

    @property
    def average_wins_at_rank(self) -> Optional[float]:
        """Average wins in trials where the team finished exactly at the target rank."""
        if self.finishes_at_rank == 0:
            return None
        return self.wins_at_rank_total / self.finishes_at_rank

    @property
    def position_probabilities(self) -> Dict[int, float]:
        return {
            rank: count / self.n_simulations * 100.0
            for rank, count in sorted(self.position_counts.items())
        }

    def merge(self, other: 'SimulationSummary') -> None:
        """Fold another partial tally for the same team and rank into this one."""
        self.n_simulations += other.n_simulations
        self.successes += other.successes
        self.wins_at_rank_total += other.wins_at_rank_total
        self.finishes_at_rank += other.finishes_at_rank
        for rank, count in other.position_counts.items():
            self.position_counts[rank] = self.position_counts.get(rank, 0) + count

    def to_dict(self) -> dict:
        return {
            "team": self.team,
            "target_rank": self.target_rank,
            "n_simulations": self.n_simulations,
            "successes": self.successes,
            "probability": self.probability,
            "position_counts": {str(k): v for k, v in sorted(self.position_counts.items())},
            "average_wins_at_rank": self.average_wins_at_rank,
            "seed": self.seed
        }
