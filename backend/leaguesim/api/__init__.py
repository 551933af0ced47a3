"""
API module.
"""

from .routes import league_router, simulations_router, pages_router
from .dependencies import get_snapshot, simulate_with_cache

__all__ = [
    "league_router",
    "simulations_router",
    "pages_router",
    "get_snapshot",
    "simulate_with_cache",
]
