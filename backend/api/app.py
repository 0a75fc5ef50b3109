"""
FastAPI application factory for the Matchday flow service.

Creates the app with:
- Flow card routes (conditions, actions, triggers)
- Middleware stack and error mapping
- Health check endpoint
- Lifespan management: football-data source, match manager, dispatcher
- Background refresh of tracked teams
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from shared.config import get_settings
from shared.utils.clock import SystemClock
from shared.utils.logging import get_logger, setup_logging
from shared.utils.metrics import start_metrics_server

from api.dependencies import init_dependencies
from api.middleware import setup_middleware
from api.routes.flow import router as flow_router
from flow.dispatcher import FlowDispatcher
from ingest.capability_cache import CapabilityCache
from ingest.match_manager import MatchManager, run_refresh_loop
from ingest.providers.football_data import FootballDataSource

logger = get_logger(__name__)


@asynccontextmanager
async def _noop_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """No-op lifespan for testing without a provider."""
    yield


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Wires the provider, capability cache and dispatcher, then keeps tracked
    teams refreshed until shutdown.
    """
    settings = get_settings()
    clock = SystemClock(settings)
    setup_logging("api", clock=clock)
    start_metrics_server()

    capabilities = CapabilityCache()
    source = FootballDataSource(settings)
    await source.start()

    manager = MatchManager(source, capabilities, clock, settings)
    dispatcher = FlowDispatcher(manager, capabilities, clock, settings)
    init_dependencies(dispatcher, capabilities)

    refresh_task = None
    if settings.team_ids:
        refresh_task = asyncio.create_task(
            run_refresh_loop(manager, settings.team_ids, settings.refresh_interval_s)
        )

    logger.info(
        "api_service_started",
        host=settings.api_host,
        port=settings.api_port,
        tracked_teams=len(settings.team_ids),
    )

    yield

    if refresh_task:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass
    await source.close()
    logger.info("api_service_stopped")


def create_app(*, use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application. Set use_lifespan=False for testing without a provider."""
    app = FastAPI(
        title="Matchday Flow API",
        description="Team fixture and live-match state for home-automation flows",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else _noop_lifespan,
    )

    setup_middleware(app)
    app.include_router(flow_router)

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "api"}

    return app


# For running with uvicorn directly
app = create_app()
