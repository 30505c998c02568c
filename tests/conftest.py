"""Shared fixtures: in-memory database and API client."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GOOGLE_PLACES_API_KEY"] = "test-places-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import Base, enable_sqlite_savepoints, get_db
from app.main import app as fastapi_app
from app.models import Match, Profile, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_savepoints(engine)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    fastapi_app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(user_id: str, name: str | None = None, **profile_fields) -> User:
        user = User(id=user_id, email=f"{user_id}@example.com", password="not-a-hash", username=user_id)
        db.add(user)
        if name is not None:
            db.add(Profile(user_id=user_id, name=name, **profile_fields))
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_match(db):
    def _make_match(
        match_id: int,
        meeting_date: str,
        start_time: str,
        user1_id: str = "alice",
        user2_id: str = "bob",
        status: str = "confirmed",
        timezone: str | None = "America/New_York",
        location: str = "Blue Bottle|||1 Main St",
    ) -> Match:
        match = Match(
            match_id=match_id,
            user1_id=user1_id,
            user2_id=user2_id,
            meeting_date=meeting_date,
            start_time=start_time,
            meeting_location=location,
            timezone=timezone,
            status=status,
        )
        db.add(match)
        db.commit()
        return match

    return _make_match
