"""Post-meeting feedback prompts and submissions."""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.timeutils import local_to_utc, resolve_timezone, utc_now
from app.models import Feedback, FeedbackRequest, Match, Profile

logger = logging.getLogger(__name__)

# How long after the start time a meeting becomes eligible for feedback
FEEDBACK_DELAY = timedelta(hours=2)


@dataclass
class FeedbackEligibleMatch:
    match_id: int
    partner_name: str
    meeting_date: str
    start_time: str
    coffee_place: str

    def as_dict(self) -> dict:
        return asdict(self)


def get_eligible_matches_for_feedback(
    db: Session, user_id: str, now: datetime | None = None
) -> list[FeedbackEligibleMatch]:
    """
    Confirmed matches of ``user_id`` that started at least two hours ago and
    have no feedback yet.
    """
    now = now or utc_now()
    last_day = (now + timedelta(days=1)).date().isoformat()
    matches = db.execute(
        select(Match).where(
            Match.status == "confirmed",
            or_(Match.user1_id == user_id, Match.user2_id == user_id),
            Match.meeting_date <= last_day,
        )
    ).scalars().all()

    eligible = []
    for match in matches:
        try:
            starts_at = local_to_utc(match.meeting_date, match.start_time, resolve_timezone(match.timezone))
        except (TypeError, ValueError):
            logger.warning("Match %s has invalid date/time, skipping", match.match_id)
            continue
        if now >= starts_at + FEEDBACK_DELAY:
            eligible.append(match)

    if not eligible:
        return []

    already_given = set(
        db.execute(
            select(Feedback.match_id).where(Feedback.match_id.in_([m.match_id for m in eligible]))
        ).scalars()
    )

    results = []
    for match in eligible:
        if match.match_id in already_given:
            continue
        partner_name = db.execute(
            select(Profile.name).where(Profile.user_id == match.partner_of(user_id))
        ).scalar_one_or_none()
        if partner_name is None:
            continue
        results.append(
            FeedbackEligibleMatch(
                match_id=match.match_id,
                partner_name=partner_name or "Unknown",
                meeting_date=match.meeting_date,
                start_time=match.start_time,
                coffee_place=match.cafe_name,
            )
        )
    return results


def mark_feedback_requested(db: Session, match_id: int, now: datetime | None = None) -> bool:
    """Record that the prompt was shown; returns False if it already was."""
    if is_feedback_requested(db, match_id):
        return False
    db.add(FeedbackRequest(match_id=match_id, requested_at=now or utc_now()))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def is_feedback_requested(db: Session, match_id: int) -> bool:
    return db.get(FeedbackRequest, match_id) is not None


def submit_feedback(db: Session, match_id: int, user_id: str, rating: int, comment: str | None = None) -> Feedback:
    feedback = Feedback(match_id=match_id, user_id=user_id, rating=rating, comment=comment)
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info("Feedback %s stored for match %s", feedback.id, match_id)
    return feedback
