"""
League data API routes.
"""

from typing import List
from fastapi import APIRouter, Depends

from ..schemas import LeagueResponse, StandingResponse, FixtureResponse, MagicNumberResponse
from ..dependencies import get_snapshot, check_request
from ...data import LeagueSnapshot
from ...simulator import calculate_magic_number


router = APIRouter(prefix="/league", tags=["league"])


@router.get("", response_model=LeagueResponse)
async def get_league(snapshot: LeagueSnapshot = Depends(get_snapshot)) -> LeagueResponse:
    """Summary of the loaded snapshot."""
    return LeagueResponse(
        snapshot_id=snapshot.snapshot_id,
        teams=[StandingResponse(**row) for row in snapshot.table.to_list()],
        remaining_fixtures=len(snapshot.fixtures)
    )


@router.get("/standings", response_model=List[StandingResponse])
async def get_standings(snapshot: LeagueSnapshot = Depends(get_snapshot)) -> List[StandingResponse]:
    """Current table in ranked order."""
    return [StandingResponse(**row) for row in snapshot.table.to_list()]


@router.get("/fixtures", response_model=List[FixtureResponse])
async def get_fixtures(snapshot: LeagueSnapshot = Depends(get_snapshot)) -> List[FixtureResponse]:
    """Remaining fixtures in file order."""
    return [FixtureResponse(**fixture.to_dict()) for fixture in snapshot.fixtures]


@router.get("/magic-number", response_model=MagicNumberResponse)
async def get_magic_number(
    team: str,
    rank: int,
    snapshot: LeagueSnapshot = Depends(get_snapshot)
) -> MagicNumberResponse:
    """Whether a team has clinched or lost a rank, and the points it still needs."""
    check_request(snapshot, team, rank)
    magic = calculate_magic_number(team, rank, snapshot.table, snapshot.fixtures)
    return MagicNumberResponse(**magic.to_dict())
