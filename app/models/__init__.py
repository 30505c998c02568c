"""Database models package."""

from app.models.user import User
from app.models.profile import Profile
from app.models.match import Match
from app.models.scheduled_notification import ScheduledNotification
from app.models.notification import Notification
from app.models.feedback import Feedback, FeedbackRequest
from app.models.rate_limit import RateLimitCounter

__all__ = [
    "User",
    "Profile",
    "Match",
    "ScheduledNotification",
    "Notification",
    "Feedback",
    "FeedbackRequest",
    "RateLimitCounter",
]
