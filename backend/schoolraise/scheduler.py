"""
APScheduler background jobs.

The only job purges expired rows from the session table; expired sessions
already fail to authenticate, the purge just keeps the table small.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from schoolraise.config import settings
from schoolraise.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def purge_expired_sessions_job() -> None:
    """Scheduled task: deletes expired sessions. Local import to avoid an import cycle."""
    from schoolraise.services.session_service import purge_expired_sessions

    db = SessionLocal()
    try:
        purge_expired_sessions(db)
    except Exception as exc:
        logger.error("Session purge failed: %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Starts the background scheduler (called when the API starts)."""
    scheduler.add_job(
        purge_expired_sessions_job,
        trigger="interval",
        minutes=settings.SESSION_PURGE_INTERVAL_MINUTES,
        id="purge_expired_sessions",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started: session purge every %d minutes.", settings.SESSION_PURGE_INTERVAL_MINUTES)


def stop_scheduler() -> None:
    """Stops the scheduler (called when the API shuts down)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped.")
