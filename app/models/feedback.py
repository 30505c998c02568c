"""Feedback models."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Feedback(Base):
    """Post-meeting rating left by one participant."""

    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"<Feedback {self.rating} for match {self.match_id}>"


class FeedbackRequest(Base):
    """Marks that the feedback prompt was already shown for a match."""

    __tablename__ = "feedback_requests"

    match_id = Column(Integer, primary_key=True)
    requested_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
