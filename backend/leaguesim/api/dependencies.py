"""
Shared dependencies for route handlers.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from .schemas import SimulationRunRequest, SimulationResultsResponse
from ..core.config import CACHE_TTL_MINUTES
from ..data import LeagueSnapshot
from ..db import SimulationCacheRepository
from ..simulator import (
    SimulationSummary,
    UnknownTeamError,
    InvalidRankError,
    calculate_magic_number,
    calculate_results,
    validate_inputs,
)


logger = logging.getLogger(__name__)


def get_snapshot(request: Request) -> LeagueSnapshot:
    """FastAPI dependency returning the snapshot loaded at startup."""
    snapshot = getattr(request.app.state, "snapshot", None)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="League data not loaded"
        )
    return snapshot


def check_request(snapshot: LeagueSnapshot, team: str, rank: int) -> None:
    """Translate simulator validation errors into HTTP errors."""
    try:
        validate_inputs(team, rank, snapshot.table, snapshot.fixtures)
    except UnknownTeamError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidRankError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def build_response(
    summary: SimulationSummary,
    snapshot: LeagueSnapshot,
    cached: bool = False,
    cached_at: Optional[datetime] = None
) -> SimulationResultsResponse:
    data = summary.to_dict()
    magic = calculate_magic_number(summary.team, summary.target_rank, snapshot.table, snapshot.fixtures)

    # Cap at 99.9% if not mathematically clinched
    probability = data["probability"]
    if not magic.clinched and probability >= 99.95:
        probability = 99.9

    return SimulationResultsResponse(
        team=data["team"],
        target_rank=data["target_rank"],
        n_simulations=data["n_simulations"],
        successes=data["successes"],
        probability=probability,
        position_counts=data["position_counts"],
        position_probabilities={str(k): v for k, v in summary.position_probabilities.items()},
        average_wins_at_rank=data["average_wins_at_rank"],
        clinched=magic.clinched,
        eliminated=magic.eliminated,
        magic_number=magic.magic,
        seed=data["seed"],
        snapshot_id=snapshot.snapshot_id,
        cached=cached,
        cached_at=cached_at
    )


async def simulate_with_cache(
    request: SimulationRunRequest,
    snapshot: LeagueSnapshot,
    db: AsyncSession
) -> SimulationResultsResponse:
    """
    Return cached results for this snapshot and request, or run and cache them.

    The simulation itself runs in the threadpool so the event loop stays free.
    """
    check_request(snapshot, request.team, request.rank)

    cache_repo = SimulationCacheRepository(db)
    cached = await cache_repo.get(
        snapshot.snapshot_id, request.team, request.rank,
        request.n_simulations, request.n_workers, request.seed
    )
    if cached is not None:
        logger.info("Cache hit for %s rank %d (%d sims)", request.team, request.rank, request.n_simulations)
        cached.update(cached=True)
        return SimulationResultsResponse(**cached)

    summary = await run_in_threadpool(
        calculate_results,
        request.team,
        request.rank,
        snapshot.table,
        snapshot.fixtures,
        n_simulations=request.n_simulations,
        n_workers=request.n_workers,
        seed=request.seed
    )
    response = build_response(summary, snapshot)

    stored = response.model_copy(update={"cached_at": datetime.now(timezone.utc)})
    await cache_repo.set(
        snapshot_id=snapshot.snapshot_id,
        team=request.team,
        target_rank=request.rank,
        n_simulations=request.n_simulations,
        n_workers=request.n_workers,
        results=stored.model_dump(mode="json"),
        seed=request.seed,
        ttl_minutes=CACHE_TTL_MINUTES
    )
    await db.commit()
    return response
