"""
SQLAlchemy database models.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import String, Integer, DateTime, Text, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class TaskStatus:
    """Lifecycle states of a background simulation."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    FINISHED = (COMPLETED, FAILED)


class SimulationCache(Base):
    """Cache for simulation results with TTL."""

    __tablename__ = "simulation_cache"

    id: Mapped[int] = mapped_column(primary_key=True)
    snapshot_id: Mapped[str] = mapped_column(String(64), nullable=False)
    team: Mapped[str] = mapped_column(String(100), nullable=False)
    target_rank: Mapped[int] = mapped_column(Integer, nullable=False)
    n_simulations: Mapped[int] = mapped_column(Integer, nullable=False)
    n_workers: Mapped[int] = mapped_column(Integer, nullable=False)
    seed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    results_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_simulation_cache_lookup", "snapshot_id", "team", "target_rank", "n_simulations"),
    )

    def __repr__(self) -> str:
        return f"<SimulationCache(team={self.team}, target_rank={self.target_rank}, n_simulations={self.n_simulations})>"

    @property
    def is_expired(self) -> bool:
        """Check if the cache entry has expired."""
        expires_at = self.expires_at
        # SQLite hands back naive datetimes
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) > expires_at


class SimulationTask(Base):
    """Background simulation task tracking."""

    __tablename__ = "simulation_tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID
    team: Mapped[str] = mapped_column(String(100), nullable=False)
    target_rank: Mapped[int] = mapped_column(Integer, nullable=False)
    n_simulations: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskStatus.PENDING)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    results_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    __table_args__ = (
        Index("ix_simulation_tasks_status", "status"),
    )

    @property
    def is_finished(self) -> bool:
        return self.status in TaskStatus.FINISHED

    def __repr__(self) -> str:
        return f"<SimulationTask(id={self.id}, team={self.team}, status={self.status})>"
