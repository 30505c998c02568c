"""Meeting reminder scheduling and cancellation."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InvalidMeetingTimeError
from app.core.timeutils import local_to_utc, resolve_timezone, utc_now
from app.models import Match, Profile, ScheduledNotification
from app.models.scheduled_notification import REMINDER_1H, REMINDER_15M, REMINDER_24H

logger = logging.getLogger(__name__)

DEFAULT_PARTNER_NAME = "Your coffee partner"

# (minutes before meeting, notification type, label)
REMINDER_OFFSETS: tuple[tuple[int, str, str], ...] = (
    (24 * 60, REMINDER_24H, "24 hours"),
    (60, REMINDER_1H, "1 hour"),
    (15, REMINDER_15M, "15 minutes"),
)

_CONFLICT_COLUMNS = ["meeting_id", "user_id", "notification_type"]


@dataclass
class ScheduleResult:
    """Outcome of scheduling reminders for one meeting."""

    matching_id: int
    meeting_time: datetime
    scheduled: int = 0
    created: int = 0
    skipped: int = 0
    errors: int = 0


@dataclass
class CancelResult:
    meeting_id: int
    cancelled: int = 0
    kept: int = 0


def reminder_times(meeting_at: datetime) -> list[tuple[str, str, datetime]]:
    """Return (type, label, instant) for each reminder, earliest first."""
    return [
        (notification_type, label, meeting_at - timedelta(minutes=offset))
        for offset, notification_type, label in REMINDER_OFFSETS
    ]


def _insert_ignore(db: Session, values: dict[str, Any]) -> int:
    """INSERT ... ON CONFLICT DO NOTHING; returns the number of inserted rows."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Upsert not supported for dialect {dialect}")

    stmt = insert(ScheduledNotification.__table__).values(**values).on_conflict_do_nothing(
        index_elements=_CONFLICT_COLUMNS
    )
    result = db.execute(stmt)
    return result.rowcount or 0


class MeetingNotificationService:
    """Creates and removes the reminder rows of a confirmed meeting."""

    def get_display_name(self, db: Session, user_id: str) -> str:
        name = db.execute(select(Profile.name).where(Profile.user_id == user_id)).scalar_one_or_none()
        return name or DEFAULT_PARTNER_NAME

    def get_meeting_timezone(self, db: Session, matching_id: int, requested: str | None) -> str | None:
        if requested:
            return requested
        return db.execute(
            select(Match.timezone).where(Match.match_id == matching_id)
        ).scalar_one_or_none()

    def schedule(
        self,
        db: Session,
        *,
        matching_id: int,
        user1_id: str,
        user2_id: str,
        meeting_date: str,
        start_time: str,
        cafe_name: str,
        timezone_name: str | None = None,
        now: datetime | None = None,
    ) -> ScheduleResult:
        """
        Schedule the 24h, 1h and 15m reminders for both participants.

        Reminders whose time is not strictly after ``now`` are skipped. Each row
        is written in its own savepoint, so one failed row is counted in
        ``errors`` without affecting the others.

        Raises:
            InvalidMeetingTimeError: If meeting_date/start_time cannot be parsed
        """
        now = now or utc_now()
        tz = resolve_timezone(self.get_meeting_timezone(db, matching_id, timezone_name))

        try:
            meeting_at = local_to_utc(meeting_date, start_time, tz)
        except (TypeError, ValueError) as e:
            raise InvalidMeetingTimeError("Invalid date/time format") from e

        logger.info(
            "Meeting %s scheduled for %s %s in %s (UTC %s)",
            matching_id, meeting_date, start_time, tz.key, meeting_at.isoformat(),
        )

        user1_name = self.get_display_name(db, user1_id)
        user2_name = self.get_display_name(db, user2_id)

        result = ScheduleResult(matching_id=matching_id, meeting_time=meeting_at)
        for user_id, partner_name in ((user1_id, user2_name), (user2_id, user1_name)):
            for notification_type, label, notify_at in reminder_times(meeting_at):
                if notify_at <= now:
                    result.skipped += 1
                    continue

                values = {
                    "meeting_id": matching_id,
                    "user_id": user_id,
                    "notification_type": notification_type,
                    "title": f"☕ Coffee Chat in {label}",
                    "body": f"Your coffee chat with {partner_name} at {cafe_name} is coming up in {label}!",
                    "scheduled_time": notify_at,
                    "metadata": {
                        "meeting_id": matching_id,
                        "cafe_name": cafe_name,
                        "partner_name": partner_name,
                        "meeting_time": meeting_at.isoformat(),
                    },
                    "sent": False,
                }
                try:
                    with db.begin_nested():
                        result.created += _insert_ignore(db, values)
                except SQLAlchemyError:
                    logger.exception("Error scheduling %s for user %s", notification_type, user_id)
                    result.errors += 1
                    continue

                result.scheduled += 1
                logger.debug("Scheduled %s for %s at %s", notification_type, user_id, notify_at.isoformat())

        db.commit()
        logger.info(
            "✅ Meeting %s: %d reminders scheduled (%d new, %d past, %d errors)",
            matching_id, result.scheduled, result.created, result.skipped, result.errors,
        )
        return result

    def cancel(self, db: Session, meeting_id: int) -> CancelResult:
        """
        Delete the unsent reminders of a meeting.

        Sent reminders are kept as a record of what was delivered.
        """
        rows = db.execute(
            select(ScheduledNotification.id, ScheduledNotification.sent).where(
                ScheduledNotification.meeting_id == meeting_id
            )
        ).all()
        result = CancelResult(meeting_id=meeting_id)
        if not rows:
            logger.info("No notifications found for meeting %s", meeting_id)
            return result

        unsent_ids = [row.id for row in rows if not row.sent]
        result.kept = len(rows) - len(unsent_ids)
        if not unsent_ids:
            logger.info("No unsent notifications for meeting %s", meeting_id)
            return result

        deleted = db.execute(
            delete(ScheduledNotification).where(
                ScheduledNotification.id.in_(unsent_ids),
                ScheduledNotification.sent.is_(False),
            )
        )
        db.commit()

        result.cancelled = deleted.rowcount or 0
        logger.info("🗑️ Cancelled %d notifications for meeting %s", result.cancelled, meeting_id)
        return result
