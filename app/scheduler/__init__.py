"""Background jobs for meeting reminders and notification delivery."""

from app.scheduler.jobs import scheduler, shutdown_scheduler, start_scheduler

__all__ = ["scheduler", "start_scheduler", "shutdown_scheduler"]
