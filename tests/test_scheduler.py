"""Tests for background job registration."""

import pytest

from app.core.config import settings
from app.scheduler import jobs


@pytest.mark.asyncio
async def test_jobs_tolerate_late_ticks() -> None:
    """Test late ticks run once instead of being dropped."""
    jobs.start_scheduler()
    try:
        poll = jobs.scheduler.get_job("upcoming_meeting_reminders")
        dispatch = jobs.scheduler.get_job("dispatch_notifications")

        assert poll.coalesce is True
        assert poll.misfire_grace_time == settings.UPCOMING_REMINDER_INTERVAL_MINUTES * 60
        assert dispatch.coalesce is True
        assert dispatch.misfire_grace_time == settings.DISPATCH_INTERVAL_SECONDS
    finally:
        jobs.shutdown_scheduler()
