import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from app.api.deps import get_db
from app.api.v1.routes import user_stats as user_stats_routes
from app.config.settings import get_settings
from app.db.models.scheduled_task import ScheduledTask
from app.db.models.user_stats import UserStats
from app.errors import SchedulingError
from app.main import app
from tests.factories import add_user

AUTH = {"X-User-Id": "alice"}


@pytest.fixture
def client(db, session_factory, local_settings):
    add_user(db, "alice", email="alice@example.com")
    db.commit()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: local_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_stats_require_a_known_caller(client):
    assert client.get("/api/v1/users/alice/stats").status_code == 401
    assert client.get("/api/v1/users/alice/stats", headers={"X-User-Id": "nobody"}).status_code == 401


def test_missing_stats_read_as_empty_record(client):
    response = client.get("/api/v1/users/bob/stats", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == "bob"
    assert body["started_games"] == 0
    assert body["reliability"] == 0.0
    assert body["rating"] is None


def test_stored_stats_never_expose_email(client, db):
    db.add(
        UserStats(
            user_id="alice",
            started_games=3,
            identity_snapshot={"id": "alice", "name": "Alice", "email": "alice@example.com"},
            rating={"rating": 1500.0, "deviation": 350.0, "volatility": 0.06, "created_at": None},
        )
    )
    db.commit()

    response = client.get("/api/v1/users/alice/stats", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["started_games"] == 3
    assert body["identity_snapshot"]["name"] == "Alice"
    assert "email" not in body["identity_snapshot"]
    assert "alice@example.com" not in response.text


def test_list_stats_pages_by_user_id(client, db):
    for user_id in ("carol", "alice", "bob"):
        db.add(UserStats(user_id=user_id, identity_snapshot={"email": f"{user_id}@example.com"}))
    db.commit()

    first = client.get("/api/v1/stats", params={"limit": 2}, headers=AUTH).json()
    assert [item["user_id"] for item in first["items"]] == ["alice", "bob"]
    assert first["next_cursor"] == "bob"

    second = client.get(
        "/api/v1/stats", params={"limit": 2, "cursor": first["next_cursor"]}, headers=AUTH
    ).json()
    assert [item["user_id"] for item in second["items"]] == ["carol"]
    assert second["next_cursor"] is None
    assert "example.com" not in str(first) + str(second)


def test_list_stats_rejects_oversized_limit(client):
    assert client.get("/api/v1/stats", params={"limit": 500}, headers=AUTH).status_code == 422


def test_refresh_enqueues_one_chain_start(client, session_factory):
    response = client.post("/api/v1/stats/refresh", json={"user_ids": ["alice", "bob"]}, headers=AUTH)

    assert response.status_code == 202
    assert response.json() == {"queued": 2}
    with session_factory() as db:
        tasks = db.execute(select(ScheduledTask)).scalars().all()
    assert len(tasks) == 1
    assert tasks[0].payload == {"user_ids": ["alice", "bob"]}


def test_refresh_with_no_ids_enqueues_nothing(client, session_factory):
    response = client.post("/api/v1/stats/refresh", json={"user_ids": []}, headers=AUTH)

    assert response.status_code == 202
    with session_factory() as db:
        assert db.execute(select(ScheduledTask)).scalars().all() == []


def test_refresh_reports_scheduling_failure(client, monkeypatch):
    def reject(db, user_ids, settings=None):
        raise SchedulingError("outbox unavailable")

    monkeypatch.setattr(user_stats_routes, "schedule_stats_update", reject)

    response = client.post("/api/v1/stats/refresh", json={"user_ids": ["alice"]}, headers=AUTH)

    assert response.status_code == 503


def test_dev_override_writes_record_locally(client, session_factory):
    response = client.put(
        "/api/v1/users/bob/stats",
        json={"started_games": 12, "reliability": 0.9, "identity_snapshot": {"email": "bob@example.com"}},
    )

    assert response.status_code == 200
    assert response.json()["started_games"] == 12
    with session_factory() as db:
        assert db.get(UserStats, "bob").reliability == 0.9


def test_dev_override_refused_outside_local(client, production_settings):
    app.dependency_overrides[get_settings] = lambda: production_settings

    response = client.put("/api/v1/users/bob/stats", json={"started_games": 1})

    assert response.status_code == 403


def test_dev_override_rejects_malformed_rating(client):
    response = client.put("/api/v1/users/bob/stats", json={"rating": {"elo": 1}})

    assert response.status_code == 422
    assert client.get("/api/v1/users/bob/stats", headers=AUTH).json()["rating"] is None


def test_dev_override_rejects_unknown_identity_fields(client):
    response = client.put(
        "/api/v1/users/bob/stats",
        json={"identity_snapshot": {"name": "Bob", "password": "hunter2"}},
    )

    assert response.status_code == 422


def test_dev_override_round_trips_rating(client):
    rating = {"rating": 1620.5, "deviation": 80.0, "volatility": 0.059, "created_at": "2026-03-01T00:00:00"}

    put = client.put("/api/v1/users/bob/stats", json={"rating": rating})
    assert put.status_code == 200

    body = client.get("/api/v1/users/bob/stats", headers=AUTH).json()
    assert body["rating"]["rating"] == 1620.5
    assert body["rating"]["created_at"] == "2026-03-01T00:00:00"


def test_refresh_rejects_empty_user_id(client, session_factory):
    response = client.post("/api/v1/stats/refresh", json={"user_ids": ["alice", ""]}, headers=AUTH)

    assert response.status_code == 422
    with session_factory() as db:
        assert db.execute(select(ScheduledTask)).scalars().all() == []
