"""Profile lookup and upsert."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Profile

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "name",
    "age",
    "occupation",
    "photo",
    "bio",
    "industry_categories",
    "skills",
    "neighborhoods",
    "favorite_cafes",
    "interests",
    "push_token",
)


def get_profile(db: Session, user_id: str) -> Profile | None:
    return db.execute(select(Profile).where(Profile.user_id == user_id)).scalar_one_or_none()


def save_profile(db: Session, user_id: str, data: dict[str, Any]) -> tuple[Profile, bool]:
    """
    Create or update the profile of ``user_id``.

    On update only truthy values overwrite stored ones, so clients can send
    partial forms. ``notifications_enabled`` is applied whenever it is given.

    Returns:
        (profile, created)
    """
    profile = get_profile(db, user_id)
    created = profile is None
    if created:
        profile = Profile(user_id=user_id)
        db.add(profile)

    for field in PROFILE_FIELDS:
        value = data.get(field)
        if value:
            setattr(profile, field, value)
    if data.get("notifications_enabled") is not None:
        profile.notifications_enabled = data["notifications_enabled"]

    db.commit()
    db.refresh(profile)
    logger.info("%s profile for user %s", "Created" if created else "Updated", user_id)
    return profile, created
