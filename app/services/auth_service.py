"""Account registration and login."""

import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import User

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10


class EmailAlreadyExistsError(Exception):
    """An account with this email is already registered."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register_user(db: Session, email: str, password: str, username: str | None = None) -> User:
    """
    Create an account with a bcrypt-hashed password.

    Emails are stored and matched exactly as given. The username defaults to
    the local part of the email.

    Raises:
        EmailAlreadyExistsError: If the email is taken
    """
    if get_user_by_email(db, email) is not None:
        raise EmailAlreadyExistsError(email)

    user = User(
        email=email,
        password=hash_password(password),
        username=username or email.split("@")[0],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user if the credentials match, otherwise None."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password):
        return None
    return user
