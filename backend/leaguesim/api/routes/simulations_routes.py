"""
Simulation API routes.

POST /simulations answers synchronously (and caches); POST /simulations/run
queues the same work as a background task that can be polled or streamed.
"""

import asyncio
import json
import logging
from fastapi import APIRouter, Depends, HTTPException, status, BackgroundTasks
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas import (
    SimulationRunRequest,
    SimulationTaskResponse,
    SimulationResultsResponse
)
from ..dependencies import get_snapshot, check_request, build_response, simulate_with_cache
from ...data import LeagueSnapshot
from ...db import get_db, async_session_maker, SimulationTask, SimulationTaskRepository, TaskStatus
from ...simulator import calculate_results


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulations", tags=["simulations"])

POLL_INTERVAL = 0.5  # seconds
# Task progress reserved for the trials themselves
PROGRESS_START = 5
PROGRESS_END = 95


async def _get_task_or_404(db: AsyncSession, task_id: str) -> SimulationTask:
    task = await SimulationTaskRepository(db).get_by_id(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def _task_response(task: SimulationTask) -> SimulationTaskResponse:
    return SimulationTaskResponse(
        task_id=task.id,
        status=task.status,
        progress=task.progress,
        error=task.error_message
    )


def _sse(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


async def run_simulation_task(task_id: str, request: SimulationRunRequest, snapshot: LeagueSnapshot):
    """
    Run a queued simulation and record the outcome on its task row.

    The trials run in a worker thread while this coroutine copies their
    progress into the database every POLL_INTERVAL seconds, so /status and
    /stream can report it.
    """
    async with async_session_maker() as db:
        task_repo = SimulationTaskRepository(db)
        task = await task_repo.get_by_id(task_id)
        if task is None:
            logger.warning("Simulation task %s disappeared before it started", task_id)
            return

        latest = {"pct": 0.0}

        def on_progress(pct: float) -> None:
            latest["pct"] = pct

        try:
            await task_repo.update_progress(task, PROGRESS_START)
            await db.commit()

            job = asyncio.ensure_future(asyncio.to_thread(
                calculate_results,
                request.team,
                request.rank,
                snapshot.table,
                snapshot.fixtures,
                n_simulations=request.n_simulations,
                n_workers=request.n_workers,
                seed=request.seed,
                progress_callback=on_progress
            ))
            span = PROGRESS_END - PROGRESS_START
            while not job.done():
                await asyncio.wait({job}, timeout=POLL_INTERVAL)
                await task_repo.update_progress(task, PROGRESS_START + int(latest["pct"] * span / 100))
                await db.commit()

            results = build_response(job.result(), snapshot)
            await task_repo.complete(task, results.model_dump(mode="json"))
            await db.commit()
        except Exception as e:
            logger.exception("Simulation task %s failed", task_id)
            await db.rollback()
            await task_repo.fail(task, str(e))
            await db.commit()


@router.post("", response_model=SimulationResultsResponse)
async def run_simulation(
    request: SimulationRunRequest,
    snapshot: LeagueSnapshot = Depends(get_snapshot),
    db: AsyncSession = Depends(get_db)
) -> SimulationResultsResponse:
    """Run a simulation and wait for it. Results are cached per snapshot and parameters."""
    return await simulate_with_cache(request, snapshot, db)


@router.post("/run", response_model=SimulationTaskResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_simulation(
    request: SimulationRunRequest,
    background_tasks: BackgroundTasks,
    snapshot: LeagueSnapshot = Depends(get_snapshot),
    db: AsyncSession = Depends(get_db)
) -> SimulationTaskResponse:
    """
    Queue a simulation.

    Bad teams and ranks are rejected here rather than failing the task later.
    """
    check_request(snapshot, request.team, request.rank)

    task = await SimulationTaskRepository(db).create(request.team, request.rank, request.n_simulations)
    await db.commit()
    logger.info("Queued simulation task %s for %s rank %d", task.id, request.team, request.rank)

    background_tasks.add_task(run_simulation_task, task.id, request, snapshot)
    return _task_response(task)


@router.get("/{task_id}/status", response_model=SimulationTaskResponse)
async def get_simulation_status(
    task_id: str,
    db: AsyncSession = Depends(get_db)
) -> SimulationTaskResponse:
    return _task_response(await _get_task_or_404(db, task_id))


@router.get("/{task_id}/results", response_model=SimulationResultsResponse)
async def get_simulation_results(
    task_id: str,
    db: AsyncSession = Depends(get_db)
) -> SimulationResultsResponse:
    """Results of a finished task; 400 while it is still going, 500 if it failed."""
    task = await _get_task_or_404(db, task_id)

    if not task.is_finished:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Simulation is still running"
        )
    if task.status == TaskStatus.FAILED:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Simulation failed: {task.error_message}"
        )
    if task.results_json is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No results available"
        )
    return SimulationResultsResponse.model_validate_json(task.results_json)


@router.get("/{task_id}/stream")
async def stream_simulation_progress(
    task_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Server-Sent Events feed of task status, closed once the task finishes."""
    await _get_task_or_404(db, task_id)

    async def events():
        while True:
            # Fresh session per poll so each read sees the background task's commits
            async with async_session_maker() as session:
                task = await SimulationTaskRepository(session).get_by_id(task_id)

            if task is None:
                yield _sse({"error": "Task not found"})
                return

            yield _sse(_task_response(task).model_dump(exclude_none=True))
            if task.is_finished:
                return
            await asyncio.sleep(POLL_INTERVAL)

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        }
    )
