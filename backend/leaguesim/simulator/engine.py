"""
Monte Carlo simulation engine for finishing-position probabilities.

Scorelines are drawn from historical English football goal frequencies:
https://fivethirtyeight.com/features/in-126-years-english-football-has-seen-13475-nil-nil-draws/
"""

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from .models import (
    Fixture,
    InvalidRankError,
    LeagueTable,
    SimulationSummary,
    UnknownTeamError,
)


logger = logging.getLogger(__name__)

NUM_POSSIBLE_GOALS = [0, 1, 2, 3, 4, 5, 6, 7]
HOME_WEIGHTS = [18.8, 30.3, 24.8, 14.3, 7.0, 3.1, 1.2, 0.5]
AWAY_WEIGHTS = [33.8, 36.2, 19.3, 7.4, 2.3, 0.7, 0.2, 0.1]

NUM_SIMULATIONS = 4000  # per worker
NUM_WORKERS = 4

ProgressCallback = Callable[[float], None]


def sample_score(rng: random.Random) -> Tuple[int, int]:
    """Draw a (home_goals, away_goals) scoreline."""
    home_goals = rng.choices(NUM_POSSIBLE_GOALS, weights=HOME_WEIGHTS)[0]
    away_goals = rng.choices(NUM_POSSIBLE_GOALS, weights=AWAY_WEIGHTS)[0]
    return home_goals, away_goals


def simulate_season(
    table: LeagueTable,
    fixtures: List[Fixture],
    rng: random.Random
) -> LeagueTable:
    """
    Play out every remaining fixture on a copy of the table.

    Args:
        table: Current standings (left untouched)
        fixtures: Remaining fixtures
        rng: Random source

    Returns:
        The completed table
    """
    simulated = table.copy()
    for fixture in fixtures:
        home_goals, away_goals = sample_score(rng)
        simulated.update(fixture, home_goals, away_goals)
    return simulated


def run_simulation(
    target_team: str,
    table: LeagueTable,
    fixtures: List[Fixture],
    rng: Optional[random.Random] = None
) -> Tuple[int, int]:
    """Simulate one season and return the target team's (rank, wins)."""
    rng = rng or random.Random()
    return simulate_season(table, fixtures, rng).find_final_rank_and_wins(target_team)


def validate_inputs(
    target_team: str,
    target_rank: int,
    table: LeagueTable,
    fixtures: List[Fixture]
) -> None:
    """
    Check a simulation request against the table.

    Raises:
        UnknownTeamError: If the team, or a team in a fixture, is not in the table
        InvalidRankError: If the rank is not between 1 and the number of teams
    """
    if target_team not in table:
        raise UnknownTeamError(f"Unknown team: {target_team}")
    if not 1 <= target_rank <= len(table):
        raise InvalidRankError(
            f"Rank must be between 1 and {len(table)}, got {target_rank}"
        )
    for fixture in fixtures:
        for name in (fixture.home, fixture.away):
            if name not in table:
                raise UnknownTeamError(f"Fixture references unknown team: {name}")


def _split_trials(n_simulations: int, n_workers: int) -> List[int]:
    base, extra = divmod(n_simulations, n_workers)
    return [base + (1 if i < extra else 0) for i in range(n_workers)]


def calculate_results(
    target_team: str,
    target_rank: int,
    table: LeagueTable,
    fixtures: List[Fixture],
    n_simulations: int = NUM_SIMULATIONS * NUM_WORKERS,
    n_workers: int = NUM_WORKERS,
    seed: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None
) -> SimulationSummary:
    """
    Run the Monte Carlo simulation across worker threads.

    Each worker runs its share of trials with its own random source and
    returns a partial tally; the tallies are merged once all workers finish.
    With a seed, worker sources are derived from it so the summary is
    reproducible regardless of thread scheduling.

    Args:
        target_team: Team to track
        target_rank: Rank to reach (1 = champion)
        table: Current standings
        fixtures: Remaining fixtures
        n_simulations: Total number of trials
        n_workers: Number of worker threads
        seed: Optional seed for reproducible runs
        progress_callback: Optional callback receiving percent complete

    Returns:
        SimulationSummary for the target team
    """
    validate_inputs(target_team, target_rank, table, fixtures)
    if n_simulations < 1:
        raise ValueError("n_simulations must be at least 1")
    if n_workers < 1:
        raise ValueError("n_workers must be at least 1")

    n_workers = min(n_workers, n_simulations)
    master = random.Random(seed)
    worker_seeds = [master.getrandbits(64) for _ in range(n_workers)]

    completed = 0
    lock = threading.Lock()

    def report(done: int) -> None:
        nonlocal completed
        if progress_callback is None:
            return
        with lock:
            completed += done
            pct = completed / n_simulations * 100
        progress_callback(pct)

    def worker(worker_seed: int, trials: int) -> SimulationSummary:
        rng = random.Random(worker_seed)
        partial = SimulationSummary(team=target_team, target_rank=target_rank, n_simulations=0)
        pending = 0
        for _ in range(trials):
            rank, wins = run_simulation(target_team, table, fixtures, rng)
            partial.n_simulations += 1
            partial.position_counts[rank] = partial.position_counts.get(rank, 0) + 1
            if rank <= target_rank:
                partial.successes += 1
                if rank == target_rank:
                    partial.wins_at_rank_total += wins
                    partial.finishes_at_rank += 1
            pending += 1
            if pending == 100:
                report(pending)
                pending = 0
        if pending:
            report(pending)
        return partial

    started = time.perf_counter()
    summary = SimulationSummary(
        team=target_team,
        target_rank=target_rank,
        n_simulations=0,
        position_counts={rank: 0 for rank in range(1, len(table) + 1)},
        seed=seed
    )

    with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="season-sim") as executor:
        futures = [
            executor.submit(worker, worker_seed, trials)
            for worker_seed, trials in zip(worker_seeds, _split_trials(n_simulations, n_workers))
        ]
        for future in futures:
            summary.merge(future.result())

    logger.info(
        "Simulated %d seasons for %s (rank <= %d) on %d workers in %.2fs: %.2f%%",
        summary.n_simulations, target_team, target_rank, n_workers,
        time.perf_counter() - started, summary.probability
    )
    return summary


def calculate_probability(
    target_team: str,
    target_rank: int,
    table: LeagueTable,
    fixtures: List[Fixture],
    n_simulations: int = NUM_SIMULATIONS * NUM_WORKERS,
    n_workers: int = NUM_WORKERS,
    seed: Optional[int] = None
) -> float:
    """Percent chance the team finishes at the target rank or better."""
    return calculate_results(
        target_team, target_rank, table, fixtures,
        n_simulations=n_simulations, n_workers=n_workers, seed=seed
    ).probability
