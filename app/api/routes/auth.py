"""Auth routes - registration, login and recovery links."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import MSG_SERVER_ERROR
from app.database import get_db
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RecoveryLinkRequest,
    RecoveryTokensOut,
    RegisterRequest,
    UserOut,
)
from app.services.auth_service import EmailAlreadyExistsError, authenticate, register_user
from app.services.recovery import parse_recovery_tokens

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> UserOut:
    """Create an account."""
    try:
        user = register_user(db, payload.email, payload.password, payload.username)
    except EmailAlreadyExistsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")
    except SQLAlchemyError:
        logger.exception("Register error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=MSG_SERVER_ERROR)
    return UserOut.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Check credentials and return the account id."""
    try:
        user = authenticate(db, payload.email, payload.password)
    except SQLAlchemyError:
        logger.exception("Login error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=MSG_SERVER_ERROR)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return LoginResponse(id=user.id, email=user.email)


@router.post("/recovery", response_model=RecoveryTokensOut)
async def recovery_tokens(payload: RecoveryLinkRequest) -> RecoveryTokensOut:
    """
    Extract session tokens from a password-reset deep link.

    404 means the URL is not a complete recovery link and the client should
    fall back to its current session.
    """
    tokens = parse_recovery_tokens(payload.url)
    if tokens is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not a recovery link")
    return RecoveryTokensOut(**tokens.as_dict())
