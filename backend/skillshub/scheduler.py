import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

scheduler: BackgroundScheduler | None = None


def purge_expired():
    """Delete expired sessions and verification codes."""
    from skillshub.database import SessionLocal
    from skillshub.services.auth import purge_expired_sessions

    db = SessionLocal()
    try:
        purge_expired_sessions(db)
    except Exception:
        db.rollback()
        logger.exception("Expired session purge failed")
    finally:
        db.close()


def start_scheduler():
    """Start the APScheduler with the hourly housekeeping job."""
    global scheduler
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        purge_expired,
        CronTrigger(minute=15),
        id="purge_expired_sessions",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started with hourly session purge")


def shutdown_scheduler():
    """Shutdown the scheduler gracefully."""
    global scheduler
    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Scheduler shut down")
