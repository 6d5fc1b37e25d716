"""Periodic raw export.

An APScheduler interval job calls one entry point. A failed run is logged
and never stops the schedule; a tick that arrives while the previous run is
still going is skipped by the scheduler (one instance at a time).
"""

from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .models import ExportSummary
from .pipeline import PricingPipeline

log = logging.getLogger(__name__)

JOB_ID = "azure-price-upload"


def run_scheduled_upload(pipeline: PricingPipeline) -> Optional[ExportSummary]:
    """One scheduled run. Failures are logged and swallowed (returns None)."""
    log.info("Starting scheduled Azure pricing upload")
    try:
        summary = pipeline.run(None)
    except Exception:
        log.exception("Scheduled Azure pricing upload failed")
        return None
    log.info(
        "Scheduled upload completed: %d records -> %s",
        summary.record_count,
        summary.destination_uri,
    )
    return summary


def build_scheduler(
        pipeline: PricingPipeline,
        interval_seconds: float,
        blocking: bool = False,
) -> BaseScheduler:
    """
    Scheduler with a single interval job running run_scheduled_upload.

    blocking=False gives a BackgroundScheduler (used by the web app);
    blocking=True a BlockingScheduler whose start() never returns (CLI).
    The first run happens one interval after start.
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")

    scheduler = BlockingScheduler() if blocking else BackgroundScheduler()
    scheduler.add_job(
        run_scheduled_upload,
        IntervalTrigger(seconds=interval_seconds),
        args=[pipeline],
        id=JOB_ID,
        name="Azure retail prices raw export",
        coalesce=True,
        max_instances=1,
    )
    log.info("Periodic upload every %.0f s", interval_seconds)
    return scheduler
