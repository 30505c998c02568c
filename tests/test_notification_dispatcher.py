"""Tests for delivering due scheduled notifications."""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy import select

from app.core.errors import UpstreamServiceError
from app.models import Notification, ScheduledNotification
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.push_service import PushService

NOW = datetime(2026, 7, 15, 12, 0, tzinfo=timezone.utc)


class FakePushService:
    """Records pushes instead of calling Expo."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, str, str, dict]] = []
        self.fail = fail

    async def send(self, push_token, title, body, data=None):
        if self.fail:
            raise UpstreamServiceError("Expo push request failed")
        self.sent.append((push_token, title, body, data or {}))
        return {"data": {"status": "ok"}}


def add_reminder(db, user_id, minutes_from_now, notification_type="reminder_1h", sent=False):
    row = ScheduledNotification(
        meeting_id=1,
        user_id=user_id,
        notification_type=notification_type,
        title="☕ Coffee Chat in 1 hour",
        body="Your coffee chat is coming up in 1 hour!",
        scheduled_time=NOW + timedelta(minutes=minutes_from_now),
        payload={"meeting_id": 1, "cafe_name": "Blue Bottle"},
        sent=sent,
    )
    db.add(row)
    db.commit()
    return row


def in_app(db):
    return db.execute(select(Notification)).scalars().all()


@pytest.mark.asyncio
async def test_dispatch_pushes_due_notifications(db, make_user) -> None:
    """Test due reminders are pushed, stored in-app and marked sent."""
    make_user("alice", name="Alice", push_token="ExponentPushToken[alice]")
    due = add_reminder(db, "alice", -1)
    future = add_reminder(db, "alice", 30, notification_type="reminder_15m")
    push = FakePushService()

    result = await NotificationDispatcher(push_service=push).dispatch(db, now=NOW)

    assert (result.due, result.processed, result.pushed, result.errors) == (1, 1, 1, 0)
    assert push.sent[0][0] == "ExponentPushToken[alice]"
    assert push.sent[0][3]["type"] == "reminder_1h"
    db.refresh(due)
    db.refresh(future)
    assert due.sent is True
    assert due.sent_at is not None
    assert future.sent is False
    assert [n.user_id for n in in_app(db)] == ["alice"]


@pytest.mark.asyncio
async def test_dispatch_never_resends(db, make_user) -> None:
    """Test a second run does not deliver already sent reminders."""
    make_user("alice", name="Alice", push_token="ExponentPushToken[alice]")
    add_reminder(db, "alice", -5)
    push = FakePushService()
    dispatcher = NotificationDispatcher(push_service=push)

    await dispatcher.dispatch(db, now=NOW)
    second = await dispatcher.dispatch(db, now=NOW + timedelta(minutes=1))

    assert second.due == 0
    assert len(push.sent) == 1


@pytest.mark.asyncio
async def test_dispatch_without_push_token(db, make_user) -> None:
    """Test users without a token get only the in-app notification."""
    make_user("bob", name="Bob")
    add_reminder(db, "bob", -1)
    push = FakePushService()

    result = await NotificationDispatcher(push_service=push).dispatch(db, now=NOW)

    assert result.processed == 1
    assert result.pushed == 0
    assert push.sent == []
    assert len(in_app(db)) == 1


@pytest.mark.asyncio
async def test_dispatch_notifications_disabled(db, make_user) -> None:
    """Test users who disabled notifications get nothing."""
    make_user("carol", name="Carol", push_token="ExponentPushToken[carol]", notifications_enabled=False)
    add_reminder(db, "carol", -1)
    push = FakePushService()

    result = await NotificationDispatcher(push_service=push).dispatch(db, now=NOW)

    assert result.processed == 1
    assert push.sent == []
    assert in_app(db) == []


@pytest.mark.asyncio
async def test_dispatch_counts_failures(db, make_user) -> None:
    """Test missing profiles and push failures are counted, not raised."""
    make_user("dave", name="Dave", push_token="ExponentPushToken[dave]")
    add_reminder(db, "ghost", -2)
    add_reminder(db, "dave", -1)

    result = await NotificationDispatcher(push_service=FakePushService(fail=True)).dispatch(db, now=NOW)

    assert result.due == 2
    assert result.errors == 2
    assert result.processed == 0


@pytest.mark.asyncio
async def test_push_service_posts_expo_message() -> None:
    """Test the Expo request body and auth header."""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["auth"] = request.headers.get("authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"status": "ok", "id": "ticket-1"}})

    service = PushService(
        push_url="https://push.test/send",
        access_token="expo-token",
        transport=httpx.MockTransport(handler),
    )
    result = await service.send("ExponentPushToken[x]", "Title", "Body", data={"type": "reminder_1h"})

    assert result["data"]["id"] == "ticket-1"
    assert captured["auth"] == "Bearer expo-token"
    assert captured["body"] == {
        "to": "ExponentPushToken[x]",
        "title": "Title",
        "body": "Body",
        "sound": "default",
        "priority": "high",
        "data": {"type": "reminder_1h"},
    }


@pytest.mark.asyncio
async def test_push_service_http_error() -> None:
    """Test Expo errors raise UpstreamServiceError."""
    service = PushService(
        push_url="https://push.test/send",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
    )
    with pytest.raises(UpstreamServiceError):
        await service.send("ExponentPushToken[x]", "Title", "Body")


def test_dispatch_endpoint(client) -> None:
    """Test the manual dispatch endpoint with nothing due."""
    response = client.post("/api/notifications/dispatch")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "No notifications due"
    assert data["processed"] == 0
