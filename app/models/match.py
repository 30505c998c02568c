"""Match model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.database import Base

LOCATION_DELIMITER = "|||"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Match(Base):
    """A proposed or confirmed coffee chat between two users."""

    __tablename__ = "matching"

    match_id = Column(Integer, primary_key=True, index=True)

    user1_id = Column(String(36), nullable=False, index=True)
    user2_id = Column(String(36), nullable=False, index=True)

    # Wall-clock values in ``timezone``: "2025-04-29" and "10:00:00"
    meeting_date = Column(String(10), nullable=True, index=True)
    start_time = Column(String(8), nullable=True)
    meeting_location = Column(Text, nullable=True)  # cafe name|||address|||...
    timezone = Column(String(64), nullable=True)

    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, confirmed, cancelled

    created_at = Column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"<Match {self.match_id}: {self.user1_id} & {self.user2_id}>"

    @property
    def cafe_name(self) -> str:
        """Cafe name stored before the first location delimiter."""
        if not self.meeting_location:
            return ""
        return self.meeting_location.split(LOCATION_DELIMITER)[0].strip()

    @property
    def participant_ids(self) -> tuple[str, str]:
        return (self.user1_id, self.user2_id)

    def partner_of(self, user_id: str) -> str:
        return self.user2_id if user_id == self.user1_id else self.user1_id
