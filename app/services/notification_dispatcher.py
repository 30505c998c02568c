"""Delivery of scheduled notifications that have come due."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import UpstreamServiceError
from app.core.timeutils import utc_now
from app.models import Notification, Profile, ScheduledNotification
from app.services.push_service import PushService

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    due: int = 0
    processed: int = 0
    pushed: int = 0
    skipped: int = 0
    errors: int = 0


class NotificationDispatcher:
    """Claims due reminders and delivers them by push and in-app notification."""

    def __init__(self, push_service: PushService | None = None) -> None:
        self.push_service = push_service or PushService()

    def get_due(self, db: Session, now: datetime) -> list[ScheduledNotification]:
        return list(
            db.execute(
                select(ScheduledNotification)
                .where(
                    ScheduledNotification.sent.is_(False),
                    ScheduledNotification.scheduled_time <= now,
                )
                .order_by(ScheduledNotification.scheduled_time)
            ).scalars()
        )

    def claim(self, db: Session, notification_id: int, now: datetime) -> bool:
        """Mark a row as sent unless another worker already did; True if we own it."""
        result = db.execute(
            update(ScheduledNotification)
            .where(
                ScheduledNotification.id == notification_id,
                ScheduledNotification.sent.is_(False),
            )
            .values(sent=True, sent_at=now)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount == 1

    def _add_in_app(self, db: Session, notification: ScheduledNotification) -> None:
        db.add(
            Notification(
                user_id=notification.user_id,
                title=notification.title,
                body=notification.body,
                payload=dict(notification.payload or {}),
            )
        )
        db.commit()

    async def deliver(self, db: Session, notification: ScheduledNotification) -> bool:
        """
        Deliver one claimed notification.

        Returns True if a push was sent. Users with notifications disabled get
        nothing; users without a push token get only the in-app notification.
        """
        profile = db.execute(
            select(Profile).where(Profile.user_id == notification.user_id)
        ).scalar_one_or_none()
        if profile is None:
            raise LookupError(f"Profile not found for user {notification.user_id}")

        if not profile.notifications_enabled:
            logger.info("Notifications disabled for user %s, skipping", notification.user_id)
            return False

        if not profile.push_token:
            logger.info("No push token for user %s, creating in-app notification", notification.user_id)
            self._add_in_app(db, notification)
            return False

        await self.push_service.send(
            profile.push_token,
            notification.title,
            notification.body,
            data={"type": notification.notification_type, **(notification.payload or {})},
        )
        self._add_in_app(db, notification)
        return True

    async def dispatch(self, db: Session, now: datetime | None = None) -> DispatchResult:
        """
        Process every unsent notification whose scheduled time has passed.

        Each row is claimed before delivery so it is never sent twice. A failed
        delivery is counted and logged; the row stays claimed.
        """
        now = now or utc_now()
        due = self.get_due(db, now)
        result = DispatchResult(due=len(due))
        logger.info("Found %d due notifications", result.due)

        for notification in due:
            notification_id = notification.id
            if not self.claim(db, notification_id, now):
                logger.info("Notification %s already claimed, skipping", notification_id)
                result.skipped += 1
                continue
            try:
                if await self.deliver(db, notification):
                    result.pushed += 1
                result.processed += 1
            except (LookupError, UpstreamServiceError, SQLAlchemyError) as e:
                logger.error("Error processing notification %s: %s", notification_id, e)
                db.rollback()
                result.errors += 1

        logger.info(
            "✅ Processed %d notifications (%d pushed, %d errors)",
            result.processed, result.pushed, result.errors,
        )
        return result


async def dispatch_due_notifications(db: Session, now: datetime | None = None) -> DispatchResult:
    """Deliver all due notifications with the default push service."""
    return await NotificationDispatcher().dispatch(db, now=now)
