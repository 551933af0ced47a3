"""
Tests for the cache and task repositories.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from leaguesim.db import Base, SimulationCacheRepository, SimulationTaskRepository


@pytest_asyncio.fixture
async def session(tmp_path):
    """Session bound to a fresh SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/repo.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as db:
        yield db

    await engine.dispose()


RESULTS = {"team": "Arsenal", "probability": 12.5}


class TestSimulationCacheRepository:
    """Tests for SimulationCacheRepository."""

    @pytest.mark.asyncio
    async def test_set_then_get(self, session):
        repo = SimulationCacheRepository(session)
        await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS)
        await session.commit()

        assert await repo.get("snap", "Arsenal", 1, 1000, 4) == RESULTS

    @pytest.mark.asyncio
    async def test_miss_on_different_key(self, session):
        repo = SimulationCacheRepository(session)
        await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS)

        assert await repo.get("other", "Arsenal", 1, 1000, 4) is None
        assert await repo.get("snap", "Chelsea", 1, 1000, 4) is None
        assert await repo.get("snap", "Arsenal", 2, 1000, 4) is None
        assert await repo.get("snap", "Arsenal", 1, 500, 4) is None
        assert await repo.get("snap", "Arsenal", 1, 1000, 2) is None

    @pytest.mark.asyncio
    async def test_seed_is_part_of_key(self, session):
        repo = SimulationCacheRepository(session)
        await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS, seed=7)

        assert await repo.get("snap", "Arsenal", 1, 1000, 4) is None
        assert await repo.get("snap", "Arsenal", 1, 1000, 4, seed=8) is None
        assert await repo.get("snap", "Arsenal", 1, 1000, 4, seed=7) == RESULTS

    @pytest.mark.asyncio
    async def test_set_replaces_existing(self, session):
        repo = SimulationCacheRepository(session)
        await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS)
        await repo.set("snap", "Arsenal", 1, 1000, 4, {"probability": 50.0})

        assert await repo.get("snap", "Arsenal", 1, 1000, 4) == {"probability": 50.0}

    @pytest.mark.asyncio
    async def test_expired_entry_is_dropped(self, session):
        repo = SimulationCacheRepository(session)
        entry = await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS)
        entry.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        await session.flush()

        assert await repo.get("snap", "Arsenal", 1, 1000, 4) is None

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, session):
        repo = SimulationCacheRepository(session)
        stale = await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS)
        await repo.set("snap", "Chelsea", 4, 1000, 4, RESULTS)
        stale.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        await session.flush()

        assert await repo.cleanup_expired() == 1
        assert await repo.get("snap", "Chelsea", 4, 1000, 4) == RESULTS

    @pytest.mark.asyncio
    async def test_invalidate(self, session):
        repo = SimulationCacheRepository(session)
        await repo.set("snap", "Arsenal", 1, 1000, 4, RESULTS)
        await repo.set("snap", "Chelsea", 4, 1000, 4, RESULTS)

        assert await repo.invalidate("snap", team="Arsenal") == 1
        assert await repo.get("snap", "Chelsea", 4, 1000, 4) == RESULTS
        assert await repo.invalidate("snap") == 1


class TestSimulationTaskRepository:
    """Tests for SimulationTaskRepository."""

    @pytest.mark.asyncio
    async def test_task_lifecycle(self, session):
        repo = SimulationTaskRepository(session)
        task = await repo.create("Brighton", 4, 16000)
        assert task.status == "pending"
        assert task.progress == 0

        await repo.update_progress(task, 40)
        assert task.status == "running"

        await repo.complete(task, RESULTS)
        await session.commit()

        stored = await repo.get_by_id(task.id)
        assert stored.status == "completed"
        assert stored.progress == 100
        assert stored.completed_at is not None
        assert '"probability": 12.5' in stored.results_json

    @pytest.mark.asyncio
    async def test_fail(self, session):
        repo = SimulationTaskRepository(session)
        task = await repo.create("Brighton", 4, 16000)
        await repo.fail(task, "boom")

        stored = await repo.get_by_id(task.id)
        assert stored.status == "failed"
        assert stored.error_message == "boom"

    @pytest.mark.asyncio
    async def test_get_unknown(self, session):
        repo = SimulationTaskRepository(session)
        assert await repo.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_cleanup_old_tasks(self, session):
        repo = SimulationTaskRepository(session)
        old = await repo.create("Brighton", 4, 16000)
        old.created_at = datetime.now(timezone.utc) - timedelta(hours=48)
        await repo.create("Chelsea", 4, 16000)
        await session.flush()

        assert await repo.cleanup_old_tasks(hours=24) == 1
