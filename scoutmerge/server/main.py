"""ScoutMerge HTTP server entry point.

Lifespan configures logging, creates missing tables when
SCOUTMERGE_CREATE_TABLES_ON_STARTUP is true (use Alembic migrations in
production), and disposes the database engine on shutdown.

Entry point:
    uvicorn scoutmerge.server.main:app --host 0.0.0.0 --port 8000

Or run directly:
    python -m scoutmerge.server.main
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from scoutmerge import __version__
from scoutmerge.api.router import api_router
from scoutmerge.config import settings
from scoutmerge.db.session import dispose_engine, init_models

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup init and shutdown cleanup."""
    logging.basicConfig(level=settings.log_level)
    logger.info("ScoutMerge server starting up...")

    if settings.create_tables_on_startup:
        await init_models()
        logger.info("Database tables ready.")

    yield

    logger.info("ScoutMerge server shutting down, disposing database engine...")
    await dispose_engine()
    logger.info("Database engine disposed.")


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate deterministic, SDK-friendly operation IDs for REST routes."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


app = FastAPI(
    title="ScoutMerge",
    description="Scouting observation review and conflict resolution",
    version=__version__,
    lifespan=lifespan,
    generate_unique_id_function=custom_generate_unique_id,
)


@app.get("/health")
async def health() -> JSONResponse:
    """Simple health check endpoint for load balancers and readiness probes."""
    return JSONResponse({"status": "ok", "service": "scoutmerge"})


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
