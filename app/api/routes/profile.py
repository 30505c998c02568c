"""Profile routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import MSG_SERVER_ERROR
from app.database import get_db
from app.models import User
from app.schemas.profile import ProfileOut, ProfileSave
from app.services.profile_service import get_profile, save_profile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=ProfileOut)
async def read_profile(user_id: str, db: Session = Depends(get_db)) -> ProfileOut:
    """Get the profile of a user."""
    profile = get_profile(db, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return ProfileOut.model_validate(profile)


@router.post("", response_model=ProfileOut)
async def upsert_profile(payload: ProfileSave, response: Response, db: Session = Depends(get_db)) -> ProfileOut:
    """Create the profile (201) or update the provided fields (200)."""
    if db.get(User, payload.user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    try:
        profile, created = save_profile(db, payload.user_id, payload.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        logger.exception("Save profile error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=MSG_SERVER_ERROR)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return ProfileOut.model_validate(profile)
