"""
Magic numbers for clinching or missing a target rank.

Magic number = further points a team needs to be certain of finishing at the
target rank or better, whatever happens in every other fixture. None when the
rank is already clinched, or when no haul from the team's own games is enough.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import Fixture, LeagueTable, InvalidRankError


POINTS_PER_WIN = 3


@dataclass
class MagicNumber:
    """Clinch/elimination status of a team for one target rank."""

    team: str
    target_rank: int
    clinched: bool = False
    eliminated: bool = False
    magic: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "team": self.team,
            "target_rank": self.target_rank,
            "clinched": self.clinched,
            "eliminated": self.eliminated,
            "magic": self.magic
        }


def games_remaining(fixtures: List[Fixture]) -> Dict[str, int]:
    """Count remaining fixtures per team."""
    counts: Dict[str, int] = defaultdict(int)
    for fixture in fixtures:
        counts[fixture.home] += 1
        counts[fixture.away] += 1
    return counts


def max_points(table: LeagueTable, fixtures: List[Fixture]) -> Dict[str, int]:
    """Highest points total each team can still reach."""
    remaining = games_remaining(fixtures)
    return {team.name: team.pts + POINTS_PER_WIN * remaining[team.name] for team in table}


def calculate_magic_number(
    team_name: str,
    target_rank: int,
    table: LeagueTable,
    fixtures: List[Fixture]
) -> MagicNumber:
    """
    Work out whether a team has clinched or lost the target rank.

    Conservative on both sides: level points count as a threat (goal
    difference could go either way) and rivals are assumed able to win all
    of their games, including those against each other.

    Args:
        team_name: Team to check
        target_rank: Rank to reach (1 = champion)
        table: Current standings
        fixtures: Remaining fixtures

    Returns:
        MagicNumber for the team
    """
    team = table.get(team_name)
    if not 1 <= target_rank <= len(table):
        raise InvalidRankError(f"Rank must be between 1 and {len(table)}, got {target_rank}")

    result = MagicNumber(team=team_name, target_rank=target_rank)
    ceilings = max_points(table, fixtures)
    rivals = [t for t in table if t.name != team_name]

    # Eliminated once target_rank rivals are already out of reach
    out_of_reach = [r for r in rivals if r.pts > ceilings[team_name]]
    if len(out_of_reach) >= target_rank:
        result.eliminated = True
        return result

    if target_rank > len(rivals):
        result.clinched = True
        return result

    # The team must finish strictly above the target_rank-th best rival ceiling
    rival_ceilings = sorted((ceilings[r.name] for r in rivals), reverse=True)
    threshold = rival_ceilings[target_rank - 1]
    needed = threshold + 1 - team.pts

    if needed <= 0:
        result.clinched = True
    elif team.pts + needed <= ceilings[team_name]:
        result.magic = needed
    return result
