"""Feedback schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FeedbackCreate(BaseModel):
    """Schema for submitting feedback after a meeting."""

    match_id: int = Field(..., gt=0)
    user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5, description="1 (poor) to 5 (great)")
    comment: str | None = Field(None, max_length=2000)


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    user_id: str
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class EligibleMatch(BaseModel):
    match_id: int
    partner_name: str
    meeting_date: str
    start_time: str
    coffee_place: str


class FeedbackRequestStatus(BaseModel):
    match_id: int
    requested: bool
