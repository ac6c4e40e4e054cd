"""
APScheduler job runner for periodic reservation processing.
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from reservation_sync.config import settings
from reservation_sync.core.exceptions import SelectionError
from reservation_sync.core.logging import get_logger

log = get_logger(__name__)

# Global scheduler instance
_scheduler: BackgroundScheduler | None = None


def process_reservations_job() -> dict | None:
    """Scheduled job: one pass over unread reservation emails.

    A failed run is logged and left for the next interval to retry.
    """
    from reservation_sync.processors.reservation import build_processor

    log.info("scheduled_job_starting", job="process_reservations")
    try:
        processor = build_processor()
        stats = processor.process()
        log.info("scheduled_job_complete", job="process_reservations", **stats)
        return stats
    except SelectionError as e:
        log.error("scheduled_job_aborted", job="process_reservations", error=str(e))
    except Exception as e:
        log.error("scheduled_job_error", job="process_reservations", error=str(e))
    return None


def start_scheduler(interval_minutes: int | None = None) -> BackgroundScheduler:
    """
    Start the background scheduler.

    A run never overlaps the previous one within this process; missed
    runs are coalesced into one.

    Args:
        interval_minutes: How often to run (default: settings.scheduler_interval_minutes)

    Returns:
        The scheduler instance
    """
    global _scheduler

    if _scheduler is not None:
        log.warning("scheduler_already_running")
        return _scheduler

    interval_minutes = interval_minutes or settings.scheduler_interval_minutes
    _scheduler = BackgroundScheduler()

    _scheduler.add_job(
        process_reservations_job,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id="process_reservations",
        name="Create calendar events from reservation emails",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    _scheduler.start()
    log.info("scheduler_started", interval_minutes=interval_minutes)

    return _scheduler


def stop_scheduler():
    """Stop the background scheduler."""
    global _scheduler

    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        log.info("scheduler_stopped")


def get_scheduler() -> BackgroundScheduler | None:
    """Get the current scheduler instance."""
    return _scheduler


def run_now() -> dict | None:
    """Manually trigger the processing job."""
    return process_reservations_job()
