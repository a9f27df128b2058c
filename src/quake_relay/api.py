"""FastAPI service exposing translated earthquake bulletins."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from quake_relay import __version__
from quake_relay.cache import FileKeyValueStore, SnapshotCache
from quake_relay.config import QuakeRelayConfig
from quake_relay.pipeline import EarthquakeService
from quake_relay.scheduler import create_scheduler

logger = logging.getLogger(__name__)


def build_service(config: QuakeRelayConfig) -> EarthquakeService:
    """Wire the default file-backed store for both snapshots and dictionaries."""
    store = FileKeyValueStore(config.cache_dir)
    return EarthquakeService(config, SnapshotCache(store), store)


def create_app(
    config: QuakeRelayConfig | None = None,
    service: EarthquakeService | None = None,
) -> FastAPI:
    if config is None:
        config = service.config if service is not None else QuakeRelayConfig()
    if service is None:
        service = build_service(config)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
        """Store startup state and run the background refresh."""
        application.state.start_time = datetime.now(tz=timezone.utc)
        application.state.service = service
        scheduler = create_scheduler(service) if config.scheduler_enabled else None
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    application = FastAPI(
        title="Quake Relay API",
        description="Translated JMA earthquake bulletins.",
        version=__version__,
        lifespan=lifespan,
    )

    @application.get("/health")
    def health(request: Request) -> dict[str, Any]:
        """Server health check with uptime, version, and refresh stats."""
        svc: EarthquakeService = request.app.state.service
        now = datetime.now(tz=timezone.utc)
        return {
            "status": "ok",
            "version": __version__,
            "uptime_seconds": round((now - request.app.state.start_time).total_seconds(), 1),
            "last_refresh": svc.last_refresh.isoformat() if svc.last_refresh else None,
            "refresh_count": svc.refresh_count,
        }

    @application.get("/earthquakes")
    @application.get("/earthquakes/{language}")
    async def get_earthquakes(
        request: Request,
        language: str | None = None,
        force: Annotated[
            bool, Query(description="Bypass the cache and refetch from JMA."),
        ] = False,
    ) -> Any:
        """Return detailed and basic bulletins translated into *language*.

        Unknown or missing languages fall back to the configured default.
        """
        svc: EarthquakeService = request.app.state.service
        try:
            return await svc.get_earthquakes(language, force=force)
        except Exception:
            logger.exception("Error processing earthquake data")
            return JSONResponse(
                status_code=502,
                content={"detail": "Failed to fetch earthquake data"},
            )

    return application


app = create_app()
