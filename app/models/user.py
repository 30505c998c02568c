"""User model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from app.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Registered account; ``password`` holds a bcrypt hash."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(320), unique=True, index=True, nullable=False)
    password = Column(String(128), nullable=False)
    username = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    profile = relationship("Profile", back_populates="user", uselist=False)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
