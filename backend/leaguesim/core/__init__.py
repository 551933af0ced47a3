"""
Core configuration and logging.
"""

from .config import (
    DATA_DIR,
    STANDINGS_FILE,
    FIXTURES_FILE,
    DEFAULT_SIMULATIONS,
    NUM_SIM_WORKERS,
    CACHE_TTL_MINUTES,
)
from .logging_utils import configure_logging, get_logger

__all__ = [
    "DATA_DIR",
    "STANDINGS_FILE",
    "FIXTURES_FILE",
    "DEFAULT_SIMULATIONS",
    "NUM_SIM_WORKERS",
    "CACHE_TTL_MINUTES",
    "configure_logging",
    "get_logger",
]
