"""Time and timezone helpers shared by the reminder services."""

import logging
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings

logger = logging.getLogger(__name__)

_TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(name: str | None) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to DEFAULT_TIMEZONE.

    Unknown names are logged and replaced by the default zone.
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            logger.warning("Unknown timezone %r, using %s", name, settings.DEFAULT_TIMEZONE)
    return ZoneInfo(settings.DEFAULT_TIMEZONE)


def parse_meeting_date(value: str) -> date:
    return date.fromisoformat(value.strip())


def parse_meeting_time(value: str) -> time:
    raw = value.strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time: {value!r}")


def local_to_utc(meeting_date: str, start_time: str, tz: ZoneInfo) -> datetime:
    """
    Interpret ``meeting_date`` + ``start_time`` as wall-clock time in ``tz``.

    Args:
        meeting_date: Date in format YYYY-MM-DD
        start_time: Time in format HH:MM or HH:MM:SS

    Returns:
        The same instant as an aware UTC datetime

    Raises:
        ValueError: If the date or time cannot be parsed
    """
    local = datetime.combine(parse_meeting_date(meeting_date), parse_meeting_time(start_time))
    return local.replace(tzinfo=tz).astimezone(timezone.utc)
