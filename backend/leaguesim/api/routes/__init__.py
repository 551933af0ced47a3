"""
API route modules.
"""

from .league_routes import router as league_router
from .simulations_routes import router as simulations_router
from .pages_routes import router as pages_router

__all__ = ["league_router", "simulations_router", "pages_router"]
