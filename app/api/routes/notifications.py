"""Meeting notification routes.

Every response carries ``success``; failures add ``error`` and ``timestamp``.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.errors import InvalidMeetingTimeError, function_error
from app.core.timeutils import utc_now
from app.database import get_db
from app.schemas.notifications import CancelMeetingRequest, ScheduleMeetingRequest
from app.services.meeting_notifications import MeetingNotificationService
from app.services.notification_dispatcher import dispatch_due_notifications
from app.services.upcoming_reminders import send_upcoming_meeting_reminders

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/schedule-meeting", response_model=None)
async def schedule_meeting(
    payload: ScheduleMeetingRequest, db: Session = Depends(get_db)
) -> dict[str, Any] | JSONResponse:
    """Schedule the 24h, 1h and 15m reminders for both participants."""
    try:
        result = MeetingNotificationService().schedule(
            db,
            matching_id=payload.matching_id,
            user1_id=payload.user1_id,
            user2_id=payload.user2_id,
            meeting_date=payload.meeting_date,
            start_time=payload.start_time,
            cafe_name=payload.cafe_name,
            timezone_name=payload.timezone,
        )
    except InvalidMeetingTimeError as e:
        return function_error(e.status_code, str(e))
    except Exception as e:
        logger.exception("Error scheduling meeting notifications")
        return function_error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return {
        "success": True,
        "message": f"Successfully scheduled {result.scheduled} notifications",
        "scheduled": result.scheduled,
        "created": result.created,
        "skipped": result.skipped,
        "errors": result.errors,
        "meetingTime": result.meeting_time.isoformat(),
        "matchingId": result.matching_id,
    }


@router.post("/cancel-meeting", response_model=None)
async def cancel_meeting(
    payload: CancelMeetingRequest, db: Session = Depends(get_db)
) -> dict[str, Any] | JSONResponse:
    """Delete the unsent reminders of a cancelled meeting."""
    try:
        result = MeetingNotificationService().cancel(db, payload.meeting_id)
    except Exception as e:
        logger.exception("Error cancelling meeting notifications")
        return function_error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    if result.cancelled == 0:
        message = "No notifications found to cancel" if result.kept == 0 else "No unsent notifications to cancel"
    else:
        message = f"Successfully cancelled {result.cancelled} scheduled notifications"
    return {
        "success": True,
        "message": message,
        "cancelled": result.cancelled,
        "meetingId": result.meeting_id,
    }


@router.post("/upcoming-reminders", response_model=None)
async def upcoming_reminders(db: Session = Depends(get_db)) -> dict[str, Any] | JSONResponse:
    """Run one tick of the upcoming-meeting reminder poll."""
    try:
        result = send_upcoming_meeting_reminders(db)
    except Exception as e:
        logger.exception("Error sending upcoming meeting reminders")
        return function_error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return {
        "success": True,
        "message": f"Sent {result.notifications} reminders for {len(result.matches)} meetings",
        "matches": result.matches,
        "notifications": result.notifications,
        "windowStart": result.window_start.isoformat(),
        "windowEnd": result.window_end.isoformat(),
    }


@router.post("/dispatch", response_model=None)
async def dispatch(db: Session = Depends(get_db)) -> dict[str, Any] | JSONResponse:
    """Deliver scheduled notifications that are due."""
    try:
        result = await dispatch_due_notifications(db)
    except Exception as e:
        logger.exception("Error dispatching scheduled notifications")
        return function_error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    if result.due == 0:
        message = "No notifications due"
    else:
        message = f"Processed {result.processed} notifications"
    return {
        "success": True,
        "message": message,
        "processed": result.processed,
        "pushed": result.pushed,
        "errors": result.errors,
        "timestamp": utc_now().isoformat(),
    }
