"""Profile schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileBase(BaseModel):
    """Editable profile attributes."""

    name: str | None = Field(None, max_length=200)
    age: int | None = Field(None, ge=0, le=150)
    occupation: str | None = Field(None, max_length=200)
    photo: str | None = Field(None, max_length=1000)
    bio: str | None = None
    industry_categories: list[str] | None = None
    skills: list[str] | None = None
    neighborhoods: list[str] | None = None
    favorite_cafes: list[str] | None = None
    interests: list[str] | None = None
    push_token: str | None = Field(None, max_length=256)
    notifications_enabled: bool | None = None


class ProfileSave(ProfileBase):
    """Schema for creating or updating a profile (all fields but user_id optional)."""

    user_id: str = Field(..., min_length=1)


class ProfileOut(BaseModel):
    """Complete profile."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    age: int | None = None
    occupation: str
    photo: str
    bio: str
    industry_categories: list[str]
    skills: list[str]
    neighborhoods: list[str]
    favorite_cafes: list[str]
    interests: list[str]
    notifications_enabled: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
