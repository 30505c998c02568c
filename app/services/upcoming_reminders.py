"""Reminders for confirmed meetings starting a few hours from now."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.timeutils import as_utc, local_to_utc, resolve_timezone, utc_now
from app.models import Match, Notification

logger = logging.getLogger(__name__)

REMINDER_TYPE = "reminder_3h"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class PollResult:
    """Outcome of one poll tick."""

    window_start: datetime
    window_end: datetime
    matches: list[int] = field(default_factory=list)
    notifications: int = 0
    skipped: int = 0


def reminder_window(
    now: datetime,
    lead_hours: int | None = None,
    interval_minutes: int | None = None,
) -> tuple[datetime, datetime]:
    """
    Half-open window [slot + lead, slot + lead + interval).

    ``slot`` is ``now`` rounded down to a multiple of the interval since the
    epoch, so a tick that fires late still covers the window of its slot and
    consecutive slots cover contiguous windows.
    """
    lead = timedelta(hours=lead_hours if lead_hours is not None else settings.UPCOMING_REMINDER_LEAD_HOURS)
    interval = timedelta(
        minutes=interval_minutes if interval_minutes is not None else settings.UPCOMING_REMINDER_INTERVAL_MINUTES
    )
    now = as_utc(now)
    slot = now - (now - _EPOCH) % interval
    start = slot + lead
    return start, start + interval


class UpcomingReminderService:
    """Creates in-app reminders for meetings entering the reminder window."""

    def __init__(self, lead_hours: int | None = None, interval_minutes: int | None = None) -> None:
        self.lead_hours = lead_hours if lead_hours is not None else settings.UPCOMING_REMINDER_LEAD_HOURS
        self.interval_minutes = (
            interval_minutes if interval_minutes is not None else settings.UPCOMING_REMINDER_INTERVAL_MINUTES
        )

    def find_matches_in_window(self, db: Session, window_start: datetime, window_end: datetime) -> list[Match]:
        """
        Confirmed matches whose local start time falls inside the window.

        Meeting dates are stored as local dates, so the SQL filter widens the
        range by one day on each side and the exact check happens per row.
        """
        first_day = (window_start - timedelta(days=1)).date().isoformat()
        last_day = (window_end + timedelta(days=1)).date().isoformat()
        candidates = db.execute(
            select(Match).where(
                Match.status == "confirmed",
                Match.meeting_date >= first_day,
                Match.meeting_date <= last_day,
            ).order_by(Match.match_id)
        ).scalars().all()

        found = []
        for match in candidates:
            try:
                starts_at = local_to_utc(match.meeting_date, match.start_time, resolve_timezone(match.timezone))
            except (TypeError, ValueError):
                logger.warning(
                    "Match %s has invalid date/time %r %r, skipping",
                    match.match_id, match.meeting_date, match.start_time,
                )
                continue
            if window_start <= starts_at < window_end:
                found.append(match)
        return found

    def already_reminded(self, db: Session, match: Match) -> set[str]:
        """Participants that already have a reminder row for this match."""
        rows = db.execute(
            select(Notification.user_id, Notification.payload).where(
                Notification.user_id.in_([uid for uid in match.participant_ids if uid])
            )
        ).all()
        return {
            row.user_id
            for row in rows
            if (row.payload or {}).get("type") == REMINDER_TYPE
            and (row.payload or {}).get("match_id") == match.match_id
        }

    def build_reminder(self, match: Match, user_id: str) -> Notification:
        hours = self.lead_hours
        unit = "hour" if hours == 1 else "hours"
        cafe = match.cafe_name or "your cafe"
        return Notification(
            user_id=user_id,
            title="☕ Coffee Chat Reminder",
            body=f"Your coffee chat at {cafe} starts in {hours} {unit}!",
            payload={"type": REMINDER_TYPE, "match_id": match.match_id},
        )

    def run(self, db: Session, now: datetime | None = None) -> PollResult:
        """
        Create one immediate notification per participant of each match in the window.

        Args:
            db: Database session
            now: Tick time (defaults to the current UTC time)

        Returns:
            PollResult with the window and the matches that were notified
        """
        now = now or utc_now()
        window_start, window_end = reminder_window(now, self.lead_hours, self.interval_minutes)
        result = PollResult(window_start=window_start, window_end=window_end)

        matches = self.find_matches_in_window(db, window_start, window_end)
        logger.info(
            "Found %d confirmed matches starting between %s and %s",
            len(matches), window_start.isoformat(), window_end.isoformat(),
        )

        for match in matches:
            reminded = self.already_reminded(db, match)
            created = 0
            for user_id in match.participant_ids:
                if not user_id or user_id in reminded:
                    result.skipped += 1
                    continue
                db.add(self.build_reminder(match, user_id))
                created += 1
            if created:
                result.notifications += created
                result.matches.append(match.match_id)

        db.commit()
        return result


def send_upcoming_meeting_reminders(db: Session, now: datetime | None = None) -> PollResult:
    """Run one tick of the upcoming-meeting poll with configured lead and interval."""
    return UpcomingReminderService().run(db, now=now)
