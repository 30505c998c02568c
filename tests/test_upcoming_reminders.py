"""Tests for the upcoming meeting reminder poll."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from app.models import Notification
from app.services.upcoming_reminders import UpcomingReminderService, reminder_window

# 12:00 UTC == 08:00 in New York (EDT)
NOW = datetime(2026, 7, 15, 12, 0, tzinfo=timezone.utc)


def notifications(db):
    return db.execute(select(Notification).order_by(Notification.user_id)).scalars().all()


def test_reminder_window() -> None:
    """Test the window starts 3h after the slot and spans one poll interval."""
    start, end = reminder_window(NOW, lead_hours=3, interval_minutes=30)
    assert start == NOW + timedelta(hours=3)
    assert end - start == timedelta(minutes=30)


def test_match_in_window_notifies_both_users(db, make_match) -> None:
    """Test a meeting 3h away creates one notification per participant."""
    make_match(1, "2026-07-15", "11:00:00")

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == [1]
    assert result.notifications == 2
    rows = notifications(db)
    assert [r.user_id for r in rows] == ["alice", "bob"]
    assert rows[0].title == "☕ Coffee Chat Reminder"
    assert rows[0].body == "Your coffee chat at Blue Bottle starts in 3 hours!"
    assert rows[0].payload == {"type": "reminder_3h", "match_id": 1}


def test_unaligned_start_time_is_caught(db, make_match) -> None:
    """Test meetings off the poll's minute alignment are still caught."""
    make_match(2, "2026-07-15", "11:17")

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == [2]


def test_window_is_half_open(db, make_match) -> None:
    """Test the window includes its start and excludes its end."""
    make_match(3, "2026-07-15", "11:30")  # exactly at window end
    make_match(4, "2026-07-15", "10:59")  # just before window start

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == []
    assert notifications(db) == []


def test_consecutive_ticks_notify_once(db, make_match) -> None:
    """Test a meeting is reminded by exactly one of two consecutive ticks."""
    make_match(5, "2026-07-15", "11:45")
    service = UpcomingReminderService(lead_hours=3, interval_minutes=30)

    first = service.run(db, now=NOW)
    second = service.run(db, now=NOW + timedelta(minutes=30))

    assert first.matches == []
    assert second.matches == [5]
    assert len(notifications(db)) == 2


def test_only_confirmed_matches(db, make_match) -> None:
    """Test pending and cancelled matches are ignored."""
    make_match(6, "2026-07-15", "11:00", status="pending")
    make_match(7, "2026-07-15", "11:00", status="cancelled")

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == []


def test_match_timezone_is_respected(db, make_match) -> None:
    """Test start times are compared in the match's own timezone."""
    # 08:00 in Los Angeles (PDT) == 15:00 UTC
    make_match(8, "2026-07-15", "08:00", timezone="America/Los_Angeles")
    # 11:00 in UTC is outside the window
    make_match(9, "2026-07-15", "11:00", timezone="UTC")

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == [8]


def test_window_across_midnight(db, make_match) -> None:
    """Test meetings on the next local day are found."""
    now = datetime(2026, 7, 16, 1, 0, tzinfo=timezone.utc)  # 21:00 on the 15th in New York
    make_match(10, "2026-07-16", "00:10")  # 04:10 UTC on the 16th

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=now)

    assert result.matches == [10]


def test_invalid_rows_are_skipped(db, make_match) -> None:
    """Test a match with a broken start time does not stop the poll."""
    make_match(11, "2026-07-15", "eleven")
    make_match(12, "2026-07-15", "11:05")

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == [12]


def test_upcoming_reminders_endpoint(client) -> None:
    """Test the manual trigger endpoint."""
    response = client.post("/api/notifications/upcoming-reminders")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["notifications"] == 0


def test_reminder_window_snaps_to_slot() -> None:
    """Test ticks anywhere in a slot share the window of the slot start."""
    late = reminder_window(NOW + timedelta(minutes=30, seconds=45), lead_hours=3, interval_minutes=30)
    early = reminder_window(NOW + timedelta(minutes=59), lead_hours=3, interval_minutes=30)

    assert late == early == (NOW + timedelta(hours=3, minutes=30), NOW + timedelta(hours=4))


def test_late_tick_still_catches_slot_start(db, make_match) -> None:
    """Test a tick that fires late still reminds meetings at the start of its window."""
    make_match(13, "2026-07-15", "11:30")  # 15:30 UTC
    service = UpcomingReminderService(lead_hours=3, interval_minutes=30)

    first = service.run(db, now=NOW)
    second = service.run(db, now=NOW + timedelta(minutes=30, seconds=45))

    assert first.matches == []
    assert second.matches == [13]
    assert len(notifications(db)) == 2


def test_repeated_tick_does_not_duplicate(db, make_match) -> None:
    """Test running the same tick twice reminds each participant once."""
    make_match(14, "2026-07-15", "11:10")
    service = UpcomingReminderService(lead_hours=3, interval_minutes=30)

    first = service.run(db, now=NOW)
    second = service.run(db, now=NOW + timedelta(minutes=5))

    assert first.matches == [14]
    assert second.matches == []
    assert second.skipped == 2
    assert len(notifications(db)) == 2


def test_region_timezone_row_does_not_stop_poll(db, make_match) -> None:
    """Test a match stored with a zone directory name uses the default zone."""
    make_match(15, "2026-07-15", "11:05", timezone="America")
    make_match(16, "2026-07-15", "11:20")

    result = UpcomingReminderService(lead_hours=3, interval_minutes=30).run(db, now=NOW)

    assert result.matches == [15, 16]
