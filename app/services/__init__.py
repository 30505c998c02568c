"""Services package."""

from app.services.meeting_notifications import MeetingNotificationService
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.places_service import PlacesService
from app.services.push_service import PushService
from app.services.upcoming_reminders import UpcomingReminderService

__all__ = [
    "MeetingNotificationService",
    "NotificationDispatcher",
    "PlacesService",
    "PushService",
    "UpcomingReminderService",
]
