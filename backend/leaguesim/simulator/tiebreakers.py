"""
Tiebreaker resolution for Premier League standings.

Ordering:
1. Points
2. Goal difference
3. Goals scored
4. Head-to-head points among the tied teams (matches recorded in the table only)
5. Team name, so the order is deterministic
"""

from itertools import groupby
from typing import Dict, List, Tuple

from .models import Team, H2HDict


def get_h2h_record(h2h: H2HDict, team1: str, team2: str) -> Tuple[int, int, int]:
    """Get head-to-head record for team1 vs team2 as (wins, losses, draws)."""
    key = (min(team1, team2), max(team1, team2))
    record = h2h.get(key, (0, 0, 0))

    if team1 < team2:
        return record
    else:
        return (record[1], record[0], record[2])


def _primary_key(team: Team) -> Tuple[int, int, int]:
    return (-team.pts, -team.goal_diff, -team.goals_for)


def resolve_tiebreaker(tied_teams: List[Team], h2h: H2HDict) -> List[Team]:
    """
    Order teams level on points, goal difference and goals scored.

    Mini-league points are computed from the head-to-head results between
    the tied teams only. Teams still level after that are ordered by name.

    Args:
        tied_teams: Teams level on the primary criteria
        h2h: Head-to-head records

    Returns:
        Teams in ranked order after tiebreaker resolution
    """
    if len(tied_teams) <= 1:
        return list(tied_teams)

    h2h_pts: Dict[str, int] = {}
    for team in tied_teams:
        pts = 0
        for other in tied_teams:
            if team.name == other.name:
                continue
            wins, _, draws = get_h2h_record(h2h, team.name, other.name)
            pts += 3 * wins + draws
        h2h_pts[team.name] = pts

    return sorted(tied_teams, key=lambda t: (-h2h_pts[t.name], t.name))


def rank_teams(teams: List[Team], h2h: H2HDict) -> List[Team]:
    """Return teams in final league order."""
    ordered = sorted(teams, key=lambda t: (_primary_key(t), t.name))

    ranked: List[Team] = []
    for _, group in groupby(ordered, key=_primary_key):
        ranked.extend(resolve_tiebreaker(list(group), h2h))
    return ranked
