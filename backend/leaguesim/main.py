"""
Premier League Finishing Position Simulator - FastAPI Application

Main entry point for the web app.
"""

import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.routes import league_router, simulations_router, pages_router
from .core import config
from .core.logging_utils import get_logger
from .data import load_snapshot
from .db import create_tables


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: the snapshot is read once and shared by every request
    app.state.snapshot = load_snapshot(config.DATA_DIR, config.STANDINGS_FILE, config.FIXTURES_FILE)
    try:
        await create_tables()
    except Exception as e:
        logger.error(f"Failed to create tables on startup: {e}")
        # Results just won't be cached
    yield
    # Shutdown


# Create FastAPI app
app = FastAPI(
    title="Premier League Finishing Position Simulator",
    description="Monte Carlo simulation of the remaining fixtures to estimate where a team finishes.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8080,http://127.0.0.1:8080").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(pages_router)
app.include_router(league_router, prefix="/api")
app.include_router(simulations_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
