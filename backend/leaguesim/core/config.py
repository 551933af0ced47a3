"""
Runtime configuration read from environment variables.
"""

import os
from pathlib import Path

from ..simulator.engine import NUM_SIMULATIONS, NUM_WORKERS


# Repository root = folder that contains "backend" and "data"
PROJECT_ROOT: Path = Path(__file__).resolve().parents[3]

# Snapshot files
DATA_DIR: Path = Path(os.getenv("LEAGUESIM_DATA_DIR", str(PROJECT_ROOT / "data")))
STANDINGS_FILE: str = os.getenv("LEAGUESIM_STANDINGS_FILE", "standings.json")
FIXTURES_FILE: str = os.getenv("LEAGUESIM_FIXTURES_FILE", "fixtures.json")

# Simulation defaults (trials per worker x workers)
SIMULATIONS_PER_WORKER: int = int(os.getenv("LEAGUESIM_NUM_SIMULATIONS", NUM_SIMULATIONS))
NUM_SIM_WORKERS: int = int(os.getenv("LEAGUESIM_NUM_WORKERS", NUM_WORKERS))
DEFAULT_SIMULATIONS: int = SIMULATIONS_PER_WORKER * NUM_SIM_WORKERS
MAX_SIMULATIONS: int = 200_000

# Result cache lifetime
CACHE_TTL_MINUTES: int = int(os.getenv("LEAGUESIM_CACHE_TTL_MINUTES", "15"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
