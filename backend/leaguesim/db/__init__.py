"""
Database module.
"""

from .database import (
    engine,
    async_session_maker,
    get_db,
    create_tables,
    drop_tables
)
from .models import Base, SimulationCache, SimulationTask, TaskStatus
from .repositories import SimulationCacheRepository, SimulationTaskRepository

__all__ = [
    # Database
    "engine",
    "async_session_maker",
    "get_db",
    "create_tables",
    "drop_tables",
    # Models
    "Base",
    "SimulationCache",
    "SimulationTask",
    "TaskStatus",
    # Repositories
    "SimulationCacheRepository",
    "SimulationTaskRepository",
]
