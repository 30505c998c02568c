"""Scheduled jobs for meeting reminders."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.database import SessionLocal
from app.services.notification_dispatcher import dispatch_due_notifications
from app.services.upcoming_reminders import send_upcoming_meeting_reminders

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler(timezone="UTC")


async def upcoming_meeting_reminders_job() -> None:
    """Job to remind participants of meetings starting in a few hours."""
    logger.info("🔄 Running: Upcoming meeting reminders job...")
    db = SessionLocal()
    try:
        result = send_upcoming_meeting_reminders(db)
        logger.info("✅ Sent %d reminders for %d meetings", result.notifications, len(result.matches))
    except Exception:
        logger.exception("❌ Error in upcoming_meeting_reminders_job")
    finally:
        db.close()


async def dispatch_notifications_job() -> None:
    """Job to deliver scheduled notifications that are due."""
    db = SessionLocal()
    try:
        result = await dispatch_due_notifications(db)
        if result.processed or result.errors:
            logger.info("📬 Dispatched %d notifications (%d errors)", result.processed, result.errors)
    except Exception:
        logger.exception("❌ Error in dispatch_notifications_job")
    finally:
        db.close()


def start_scheduler() -> None:
    """Start the scheduler with all jobs."""
    logger.info("🚀 Starting scheduler...")

    # Job 1: Upcoming meeting reminders every 30 minutes
    scheduler.add_job(
        upcoming_meeting_reminders_job,
        trigger=IntervalTrigger(minutes=settings.UPCOMING_REMINDER_INTERVAL_MINUTES),
        id="upcoming_meeting_reminders",
        name="Upcoming meeting reminders",
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=settings.UPCOMING_REMINDER_INTERVAL_MINUTES * 60,
    )
    logger.info(
        "📅 Scheduled: Upcoming meeting reminders every %d minutes",
        settings.UPCOMING_REMINDER_INTERVAL_MINUTES,
    )

    # Job 2: Deliver due reminders
    scheduler.add_job(
        dispatch_notifications_job,
        trigger=IntervalTrigger(seconds=settings.DISPATCH_INTERVAL_SECONDS),
        id="dispatch_notifications",
        name="Dispatch scheduled notifications",
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=settings.DISPATCH_INTERVAL_SECONDS,
    )
    logger.info("📬 Scheduled: Dispatch notifications every %d seconds", settings.DISPATCH_INTERVAL_SECONDS)

    scheduler.start()
    logger.info("✅ Scheduler started successfully!")


def shutdown_scheduler() -> None:
    """Shutdown the scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("🛑 Scheduler stopped")
