"""Meeting notification schemas.

Request bodies use the camelCase field names the mobile app sends.
"""

from pydantic import BaseModel, ConfigDict, Field


class ScheduleMeetingRequest(BaseModel):
    """Schema for scheduling the reminders of a confirmed meeting."""

    model_config = ConfigDict(populate_by_name=True)

    matching_id: int = Field(..., alias="matchingId", gt=0)
    user1_id: str = Field(..., alias="user1Id", min_length=1)
    user2_id: str = Field(..., alias="user2Id", min_length=1)
    meeting_date: str = Field(..., alias="meetingDate", min_length=1, description="YYYY-MM-DD")
    start_time: str = Field(..., alias="startTime", min_length=1, description="HH:MM or HH:MM:SS")
    cafe_name: str = Field(..., alias="cafeName", min_length=1)
    timezone: str | None = Field(None, description="IANA timezone, e.g. America/New_York")


class CancelMeetingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meeting_id: int = Field(..., alias="meetingId", gt=0)
