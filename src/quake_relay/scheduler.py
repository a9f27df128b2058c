"""Periodic background refresh using APScheduler."""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from quake_relay.pipeline import EarthquakeService

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "earthquake_refresh"


def create_scheduler(service: EarthquakeService) -> AsyncIOScheduler:
    """Build a scheduler running ``service.scheduled_refresh`` on an interval.

    Job failures are left to APScheduler, which logs them and emits
    ``EVENT_JOB_ERROR``; the job is not retried before its next run.
    """
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        service.scheduled_refresh,
        IntervalTrigger(seconds=service.config.refresh_interval_seconds),
        id=REFRESH_JOB_ID,
        name="Refresh JMA earthquake snapshot",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info(
        "Scheduled earthquake refresh every %ds", service.config.refresh_interval_seconds
    )
    return scheduler
