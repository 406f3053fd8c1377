from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.constants import DEFAULT_SYNC_INTERVAL_MINUTES
from .service import SyncRunReport, SyncService

logger = logging.getLogger(__name__)

JOB_ID = "canteen_entry_sync"


def run_sync_job(sync_service: SyncService) -> Optional[SyncRunReport]:
    """[scheduled job] One idempotent pass over today for every registered site."""
    logger.info("Running canteen entry sync job...")
    try:
        return sync_service.run()
    except Exception:
        # The next tick retries; keep the scheduler alive.
        logger.exception("Canteen entry sync job failed")
        return None


def build_scheduler(
    sync_service: SyncService,
    *,
    interval_minutes: int = DEFAULT_SYNC_INTERVAL_MINUTES,
    scheduler: Optional[BackgroundScheduler] = None,
) -> BackgroundScheduler:
    """Register the sync job on a background scheduler without starting it.

    One instance at a time: a tick that finds the previous run still going is
    skipped, and missed ticks are coalesced into one.
    """
    scheduler = scheduler or BackgroundScheduler(daemon=True)
    scheduler.add_job(
        run_sync_job,
        "interval",
        minutes=int(interval_minutes),
        args=[sync_service],
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    return scheduler


def start_scheduler(sync_service: SyncService, *, interval_minutes: int = DEFAULT_SYNC_INTERVAL_MINUTES) -> BackgroundScheduler:
    scheduler = build_scheduler(sync_service, interval_minutes=interval_minutes)
    scheduler.start()
    logger.info("Canteen sync scheduler started (every %d min)", int(interval_minutes))
    return scheduler
