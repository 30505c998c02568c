"""Profile model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    """Public profile of a user, one per account."""

    __tablename__ = "profiles"

    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)

    name = Column(String(200), nullable=False, default="")
    age = Column(Integer, nullable=True)
    occupation = Column(String(200), nullable=False, default="")
    photo = Column(String(1000), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")

    # Lists of tags chosen in the app
    industry_categories = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    neighborhoods = Column(JSON, nullable=False, default=list)
    favorite_cafes = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)

    # Notifications
    push_token = Column(String(256), nullable=True)
    notifications_enabled = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="profile")

    def __repr__(self) -> str:
        return f"<Profile {self.user_id}: {self.name}>"
