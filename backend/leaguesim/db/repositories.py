"""
Persistence for cached simulation results and background task state.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SimulationCache, SimulationTask, TaskStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheKey:
    """Everything a cached result depends on."""

    snapshot_id: str
    team: str
    target_rank: int
    n_simulations: int
    n_workers: int
    seed: Optional[int] = None

    def where(self) -> tuple:
        if self.seed is None:
            seed_clause = SimulationCache.seed.is_(None)
        else:
            seed_clause = SimulationCache.seed == self.seed
        return (
            SimulationCache.snapshot_id == self.snapshot_id,
            SimulationCache.team == self.team,
            SimulationCache.target_rank == self.target_rank,
            SimulationCache.n_simulations == self.n_simulations,
            SimulationCache.n_workers == self.n_workers,
            seed_clause,
        )


class SimulationCacheRepository:
    """Results cache keyed by data snapshot and request parameters."""

    DEFAULT_TTL_MINUTES = 15

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self,
        snapshot_id: str,
        team: str,
        target_rank: int,
        n_simulations: int,
        n_workers: int,
        seed: Optional[int] = None
    ) -> Optional[dict]:
        """Cached results for the key, or None. Stale rows are deleted on sight."""
        key = CacheKey(snapshot_id, team, target_rank, n_simulations, n_workers, seed)
        result = await self.session.execute(select(SimulationCache).where(*key.where()))
        entry = result.scalars().first()

        if entry is None:
            return None
        if entry.is_expired:
            await self.session.delete(entry)
            return None
        return json.loads(entry.results_json)

    async def set(
        self,
        snapshot_id: str,
        team: str,
        target_rank: int,
        n_simulations: int,
        n_workers: int,
        results: dict,
        seed: Optional[int] = None,
        ttl_minutes: int = DEFAULT_TTL_MINUTES
    ) -> SimulationCache:
        """
        Store results under their key, replacing any previous row.

        Args:
            snapshot_id: Hash of the data files the results came from
            team: Team name
            target_rank: Target rank
            n_simulations: Number of trials
            n_workers: Number of worker threads
            results: JSON-serializable results
            seed: Seed used for the run, if any
            ttl_minutes: Minutes until the row goes stale
        """
        key = CacheKey(snapshot_id, team, target_rank, n_simulations, n_workers, seed)
        await self.session.execute(delete(SimulationCache).where(*key.where()))

        entry = SimulationCache(
            **asdict(key),
            results_json=json.dumps(results),
            expires_at=_utcnow() + timedelta(minutes=ttl_minutes)
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def invalidate(self, snapshot_id: str, team: Optional[str] = None) -> int:
        """Drop results for a snapshot, or for one team in it. Returns rows deleted."""
        stmt = delete(SimulationCache).where(SimulationCache.snapshot_id == snapshot_id)
        if team is not None:
            stmt = stmt.where(SimulationCache.team == team)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def cleanup_expired(self) -> int:
        result = await self.session.execute(
            delete(SimulationCache).where(SimulationCache.expires_at < _utcnow())
        )
        return result.rowcount


class SimulationTaskRepository:
    """Status, progress and outcome of background simulation runs."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, team: str, target_rank: int, n_simulations: int) -> SimulationTask:
        task = SimulationTask(
            id=str(uuid4()),
            team=team,
            target_rank=target_rank,
            n_simulations=n_simulations,
            status=TaskStatus.PENDING,
            progress=0
        )
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def get_by_id(self, task_id: str) -> Optional[SimulationTask]:
        return await self.session.get(SimulationTask, task_id)

    async def _transition(self, task: SimulationTask, new_status: str, **fields) -> None:
        task.status = new_status
        for name, value in fields.items():
            setattr(task, name, value)
        if task.is_finished:
            task.completed_at = _utcnow()
        await self.session.flush()

    async def update_progress(self, task: SimulationTask, progress: int) -> None:
        """Mark the task running at `progress` percent."""
        await self._transition(task, TaskStatus.RUNNING, progress=progress)

    async def complete(self, task: SimulationTask, results: dict) -> None:
        await self._transition(
            task, TaskStatus.COMPLETED, progress=100, results_json=json.dumps(results)
        )

    async def fail(self, task: SimulationTask, error_message: str) -> None:
        await self._transition(task, TaskStatus.FAILED, error_message=error_message)

    async def cleanup_old_tasks(self, hours: int = 24) -> int:
        """Delete tasks created more than `hours` ago. Returns rows deleted."""
        cutoff = _utcnow() - timedelta(hours=hours)
        result = await self.session.execute(
            delete(SimulationTask).where(SimulationTask.created_at < cutoff)
        )
        return result.rowcount
