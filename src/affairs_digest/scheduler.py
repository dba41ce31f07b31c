"""Scheduler for the daily digest send."""

import logging
import signal
import sys
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from affairs_digest.config import Config, get_config

logger = logging.getLogger(__name__)

JOB_ID = "daily_digest"

FailureHandler = Callable[[Optional[BaseException]], None]


def digest_job(dispatcher, on_failure: Optional[FailureHandler] = None) -> None:
    """Run one digest cycle, reporting failures to on_failure.

    on_failure receives the raised exception, or None when the run
    completed but reported failure.
    """
    logger.info("Running scheduled digest job")

    try:
        sent = dispatcher.run()
    except Exception as e:
        logger.error(f"Scheduled digest job crashed: {e}")
        if on_failure:
            on_failure(e)
        return

    if sent:
        logger.info("Scheduled digest sent")
        return

    logger.error("Scheduled digest was not sent")
    if on_failure:
        on_failure(None)


CRON_FIELDS = ("minute", "hour", "day", "month", "day_of_week")


def parse_cron(cron_str: str) -> dict:
    """Map a five-field crontab expression onto CronTrigger kwargs."""
    parts = cron_str.split()
    if len(parts) != len(CRON_FIELDS):
        raise ValueError(
            f"Invalid cron format: {cron_str!r} (expected {len(CRON_FIELDS)} fields)"
        )
    return dict(zip(CRON_FIELDS, parts))


def build_scheduler(
    config: Optional[Config] = None,
    dispatcher=None,
    on_failure: Optional[FailureHandler] = None,
    foreground: bool = False,
):
    """Create a scheduler with the daily digest job registered but not started."""
    config = config or get_config()

    if dispatcher is None:
        from affairs_digest.dispatcher import DigestDispatcher

        dispatcher = DigestDispatcher(config)

    # None falls back to the host local zone
    timezone = config.scheduler.timezone
    trigger = CronTrigger(**parse_cron(config.scheduler.cron), timezone=timezone)

    if foreground:
        scheduler = BlockingScheduler(timezone=timezone)
    else:
        scheduler = BackgroundScheduler(timezone=timezone)

    scheduler.add_job(
        digest_job,
        trigger=trigger,
        args=[dispatcher],
        kwargs={"on_failure": on_failure},
        id=JOB_ID,
        name="Daily Digest",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    logger.info(f"Digest scheduled: {config.scheduler.cron} (timezone: {timezone or 'host local'})")
    return scheduler


def start_scheduler(
    config: Optional[Config] = None,
    dispatcher=None,
    on_failure: Optional[FailureHandler] = None,
    foreground: bool = False,
):
    """Start the scheduler daemon.

    Args:
        config: Configuration to schedule from
        dispatcher: Dispatcher the job runs, built from config if omitted
        on_failure: Called after any failed scheduled run
        foreground: If True, run in foreground (blocking).
                   If False, run in background and return the scheduler.
    """
    config = config or get_config()

    try:
        scheduler = build_scheduler(config, dispatcher, on_failure, foreground)
    except ValueError as e:
        logger.error(f"Invalid cron configuration: {e}")
        raise

    if foreground:
        def shutdown(signum, frame):
            logger.info("Shutting down scheduler...")
            scheduler.shutdown(wait=False)
            sys.exit(0)

        signal.signal(signal.SIGINT, shutdown)
        signal.signal(signal.SIGTERM, shutdown)

        logger.info("Running in foreground. Press Ctrl+C to stop.")
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            pass
        return None

    scheduler.start()
    logger.info("Scheduler running in background")
    return scheduler


def stop_scheduler(scheduler: Optional[BackgroundScheduler] = None):
    """Stop the scheduler.

    Args:
        scheduler: Scheduler instance to stop
    """
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
