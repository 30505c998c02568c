"""Feedback routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.feedback import EligibleMatch, FeedbackCreate, FeedbackOut, FeedbackRequestStatus
from app.services import feedback_service

router = APIRouter()


@router.get("/eligible/{user_id}", response_model=list[EligibleMatch])
async def eligible_matches(user_id: str, db: Session = Depends(get_db)) -> list[EligibleMatch]:
    """Get past meetings of a user that still need feedback."""
    return [
        EligibleMatch(**match.as_dict())
        for match in feedback_service.get_eligible_matches_for_feedback(db, user_id)
    ]


@router.post("", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
async def create_feedback(payload: FeedbackCreate, db: Session = Depends(get_db)) -> FeedbackOut:
    """Submit feedback for a meeting."""
    feedback = feedback_service.submit_feedback(
        db, payload.match_id, payload.user_id, payload.rating, payload.comment
    )
    return FeedbackOut.model_validate(feedback)


@router.post("/requests/{match_id}", response_model=FeedbackRequestStatus)
async def mark_requested(match_id: int, db: Session = Depends(get_db)) -> FeedbackRequestStatus:
    """Record that the feedback prompt was shown for a match."""
    feedback_service.mark_feedback_requested(db, match_id)
    return FeedbackRequestStatus(match_id=match_id, requested=True)


@router.get("/requests/{match_id}", response_model=FeedbackRequestStatus)
async def get_requested(match_id: int, db: Session = Depends(get_db)) -> FeedbackRequestStatus:
    """Check whether the feedback prompt was already shown."""
    return FeedbackRequestStatus(match_id=match_id, requested=feedback_service.is_feedback_requested(db, match_id))
