"""
FastAPI application exposing health, manual runs and scheduler status.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException

from reservation_sync import __version__
from reservation_sync.config import settings
from reservation_sync.core.exceptions import ConfigurationError, SelectionError
from reservation_sync.core.logging import configure_logging, get_logger
from reservation_sync.processors.base import BaseProcessor
from reservation_sync.scheduler import get_scheduler, start_scheduler, stop_scheduler

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    configure_logging(settings.log_level, settings.log_json)
    log.info("application_starting")

    if settings.scheduler_enabled:
        start_scheduler()
    else:
        log.info("scheduler_disabled", reason="trigger runs with POST /process")

    yield

    stop_scheduler()
    log.info("application_stopped")


app = FastAPI(
    title="Reservation Sync",
    description="Creates calendar events from reservation-confirmation emails",
    version=__version__,
    lifespan=lifespan,
)


def get_processor() -> BaseProcessor:
    """Processor wired from settings; overridden in tests."""
    from reservation_sync.processors.reservation import build_processor

    try:
        return build_processor()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))


# Endpoints

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/process")
def trigger_processing(processor: BaseProcessor = Depends(get_processor)):
    """
    Run one processing pass now and return its statistics.

    Runs in the request thread so the caller sees the outcome.
    """
    try:
        stats = processor.process()
    except SelectionError as e:
        raise HTTPException(status_code=503, detail=f"Mailbox unavailable: {e}")
    return {"status": "complete", **stats}


@app.get("/scheduler")
async def scheduler_status():
    """Report whether the periodic job is running and when it fires next."""
    scheduler = get_scheduler()
    if scheduler is None:
        return {"running": False, "next_run": None}

    job = scheduler.get_job("process_reservations")
    next_run = job.next_run_time.isoformat() if job and job.next_run_time else None
    return {"running": scheduler.running, "next_run": next_run}


# Run with: uvicorn reservation_sync.main:app --host 0.0.0.0 --port 8001
