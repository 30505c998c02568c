"""Rate limit counter model."""

from sqlalchemy import Column, Integer, String

from app.database import Base


class RateLimitCounter(Base):
    """Fixed-window request counter shared by all API instances."""

    __tablename__ = "rate_limit_counters"

    key = Column(String(255), primary_key=True)
    window_start = Column(Integer, primary_key=True)  # epoch seconds, aligned to the window
    count = Column(Integer, nullable=False, default=0)
