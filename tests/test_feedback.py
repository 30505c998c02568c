"""Tests for feedback prompts and submissions."""

from datetime import datetime, timezone

from app.services import feedback_service

# 20:00 UTC == 16:00 in New York (EDT)
NOW = datetime(2026, 7, 15, 20, 0, tzinfo=timezone.utc)


def test_eligible_matches(db, make_user, make_match) -> None:
    """Test only confirmed meetings that started 2+ hours ago qualify."""
    make_user("alice", name="Alice")
    make_user("bob", name="Bob")
    make_match(1, "2026-07-15", "13:00")  # 3h ago
    make_match(2, "2026-07-15", "15:00")  # 1h ago
    make_match(3, "2026-07-14", "10:00", status="cancelled")

    results = feedback_service.get_eligible_matches_for_feedback(db, "alice", now=NOW)

    assert [r.as_dict() for r in results] == [
        {
            "match_id": 1,
            "partner_name": "Bob",
            "meeting_date": "2026-07-15",
            "start_time": "13:00",
            "coffee_place": "Blue Bottle",
        }
    ]


def test_matches_with_feedback_are_excluded(db, make_user, make_match) -> None:
    """Test meetings that already have feedback are not offered again."""
    make_user("alice", name="Alice")
    make_user("bob", name="Bob")
    make_match(1, "2026-07-14", "09:00")
    feedback_service.submit_feedback(db, 1, "bob", 5, "Great chat")

    assert feedback_service.get_eligible_matches_for_feedback(db, "alice", now=NOW) == []


def test_feedback_requests_are_recorded_once(db) -> None:
    """Test marking a prompt twice is harmless."""
    assert feedback_service.is_feedback_requested(db, 9) is False
    assert feedback_service.mark_feedback_requested(db, 9) is True
    assert feedback_service.mark_feedback_requested(db, 9) is False
    assert feedback_service.is_feedback_requested(db, 9) is True


def test_feedback_endpoints(client, make_user, make_match) -> None:
    """Test submitting feedback and prompt bookkeeping over HTTP."""
    make_user("alice", name="Alice")
    make_user("bob", name="Bob")
    make_match(1, "2020-01-01", "09:00")

    eligible = client.get("/api/feedback/eligible/alice")
    assert eligible.status_code == 200
    assert [m["match_id"] for m in eligible.json()] == [1]

    created = client.post("/api/feedback", json={"match_id": 1, "user_id": "alice", "rating": 4})
    assert created.status_code == 201
    assert created.json()["rating"] == 4

    invalid = client.post("/api/feedback", json={"match_id": 1, "user_id": "alice", "rating": 9})
    assert invalid.status_code == 400

    assert client.get("/api/feedback/eligible/alice").json() == []

    assert client.get("/api/feedback/requests/1").json() == {"match_id": 1, "requested": False}
    assert client.post("/api/feedback/requests/1").json() == {"match_id": 1, "requested": True}
    assert client.get("/api/feedback/requests/1").json() == {"match_id": 1, "requested": True}
