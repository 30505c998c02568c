"""Scheduled notification model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint

from app.database import Base

REMINDER_24H = "reminder_24h"
REMINDER_1H = "reminder_1h"
REMINDER_15M = "reminder_15m"


class ScheduledNotification(Base):
    """
    A meeting reminder due at ``scheduled_time`` (UTC).

    At most one row exists per (meeting, user, type); rows are inserted with
    ON CONFLICT DO NOTHING so scheduling the same meeting twice is a no-op.
    """

    __tablename__ = "scheduled_notifications"
    __table_args__ = (
        UniqueConstraint(
            "meeting_id", "user_id", "notification_type",
            name="uq_scheduled_notifications_meeting_user_type",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    meeting_id = Column(Integer, nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    notification_type = Column(String(32), nullable=False)  # reminder_24h, reminder_1h, reminder_15m

    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    scheduled_time = Column(DateTime(timezone=True), nullable=False, index=True)
    payload = Column("metadata", JSON, nullable=False, default=dict)

    sent = Column(Boolean, nullable=False, default=False, index=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<ScheduledNotification {self.notification_type} for {self.user_id} (meeting {self.meeting_id})>"
