from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.db.base import utcnow
from app.db.enums import TaskStatus, TaskType
from app.db.models.scheduled_task import ScheduledTask
from app.db.models.user_stats import UserStats
from app.errors import LeaseLostError
from app.services.task_queue import enqueue
from app.services.task_registry import build_task_registry
from app.services import task_worker as task_worker_module
from app.services.task_worker import TaskWorker, retry_delay_seconds
from app.services.user_stats import schedule_stats_update
from tests.factories import add_user


def _outbox(session_factory):
    with session_factory() as db:
        return db.execute(select(ScheduledTask).order_by(ScheduledTask.id)).scalars().all()


def _stats_ids(session_factory):
    with session_factory() as db:
        return db.execute(select(UserStats.user_id).order_by(UserStats.user_id)).scalars().all()


def _recording_registry(calls):
    registry = build_task_registry()
    update_one = registry[TaskType.UPDATE_USER_STAT]

    def record(db, payload):
        calls.append(payload["user_id"])
        update_one(db, payload)

    registry[TaskType.UPDATE_USER_STAT] = record
    return registry


@pytest.fixture
def users(db):
    for user_id in ("alice", "bob", "carol"):
        add_user(db, user_id)
    db.commit()


def test_chain_processes_every_id_head_first(users, db, session_factory, local_settings):
    calls = []
    schedule_stats_update(db, ["alice", "bob", "carol"], settings=local_settings)
    db.commit()

    worker = TaskWorker(session_factory, _recording_registry(calls), settings=local_settings)
    processed = worker.run_until_empty()

    assert calls == ["alice", "bob", "carol"]
    # three chain steps and three single-user updates
    assert processed == 6
    assert _stats_ids(session_factory) == ["alice", "bob", "carol"]
    assert _outbox(session_factory) == []


def test_duplicate_ids_are_processed_independently(users, db, session_factory, local_settings):
    calls = []
    schedule_stats_update(db, ["bob", "bob"], settings=local_settings)
    db.commit()

    TaskWorker(session_factory, _recording_registry(calls), settings=local_settings).run_until_empty()

    assert calls == ["bob", "bob"]


def test_debounced_task_waits_for_its_run_at(users, db, session_factory, production_settings):
    schedule_stats_update(db, ["alice"], settings=production_settings)
    db.commit()

    worker = TaskWorker(session_factory, build_task_registry(), settings=production_settings)

    assert worker.run_once() is False
    assert worker.run_once(now=utcnow() + timedelta(seconds=11)) is True


def test_failed_step_rolls_back_its_enqueues_and_retries(users, db, session_factory, local_settings):
    registry = build_task_registry()
    chain_step = registry[TaskType.UPDATE_USER_STATS]
    failures = []

    def flaky(db, payload):
        chain_step(db, payload)
        if not failures:
            failures.append(payload)
            raise RuntimeError("commit rejected")

    registry[TaskType.UPDATE_USER_STATS] = flaky
    schedule_stats_update(db, ["alice", "bob"], settings=local_settings)
    db.commit()

    worker = TaskWorker(session_factory, registry, settings=local_settings)
    assert worker.run_once() is True

    tasks = _outbox(session_factory)
    assert len(tasks) == 1
    assert tasks[0].task_type == TaskType.UPDATE_USER_STATS
    assert tasks[0].status == TaskStatus.PENDING
    assert tasks[0].attempts == 1
    assert "commit rejected" in tasks[0].last_error

    # backoff keeps it from running straight away
    assert worker.run_once() is False

    later = utcnow() + timedelta(seconds=30)
    worker.run_until_empty(now=later)

    assert _stats_ids(session_factory) == ["alice", "bob"]
    assert _outbox(session_factory) == []


def test_task_is_marked_failed_after_max_attempts(session_factory, local_settings):
    def always_fails(db, payload):
        raise RuntimeError("rating service down")

    registry = {TaskType.UPDATE_USER_STAT: always_fails}
    with session_factory() as db, db.begin():
        enqueue(db, TaskType.UPDATE_USER_STAT, {"user_id": "alice"})

    worker = TaskWorker(session_factory, registry, settings=local_settings)
    now = utcnow()
    for _ in range(local_settings.task_max_attempts):
        now += timedelta(hours=1)
        assert worker.run_once(now=now) is True

    task = _outbox(session_factory)[0]
    assert task.status == TaskStatus.FAILED
    assert task.attempts == local_settings.task_max_attempts
    assert worker.run_once(now=now + timedelta(days=1)) is False


def test_unknown_task_type_is_retried_not_dropped(session_factory, local_settings):
    with session_factory() as db, db.begin():
        enqueue(db, TaskType.UPDATE_USER_STAT, {"user_id": "alice"})

    worker = TaskWorker(session_factory, {}, settings=local_settings)
    assert worker.run_once() is True

    task = _outbox(session_factory)[0]
    assert task.status == TaskStatus.PENDING
    assert "UnknownTaskTypeError" in task.last_error


def test_redelivery_after_lease_expiry_runs_each_id_once(users, db, session_factory, local_settings):
    calls = []
    schedule_stats_update(db, ["alice", "bob"], settings=local_settings)
    db.commit()

    registry = _recording_registry(calls)
    stalled = TaskWorker(session_factory, registry, settings=local_settings)
    now = utcnow()
    stale_claim = stalled.claim(now)
    assert stale_claim is not None

    # nothing else is due while the lease is held
    rescuer = TaskWorker(session_factory, registry, settings=local_settings)
    assert rescuer.run_once(now=now) is False

    after_lease = now + timedelta(seconds=local_settings.task_lease_seconds + 1)
    rescuer.run_until_empty(now=after_lease)

    # the stalled worker finally wakes up and tries to finish its delivery
    with pytest.raises(LeaseLostError):
        stalled._execute(stale_claim)

    rescuer.run_until_empty(now=after_lease)
    assert calls == ["alice", "bob"]
    assert _outbox(session_factory) == []


def test_retry_delay_grows_exponentially_up_to_a_cap():
    assert retry_delay_seconds(1, 5, 3600) == 5
    assert retry_delay_seconds(2, 5, 3600) == 10
    assert retry_delay_seconds(4, 5, 3600) == 40
    assert retry_delay_seconds(20, 5, 3600) == 3600


class _RestartingDatabase:
    """Session factory whose first call fails the way a restarting database does."""

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self.failures = 0

    def __call__(self):
        if self.failures == 0:
            self.failures += 1
            raise OperationalError("SELECT scheduled_tasks", {}, Exception("db restarting"))
        return self._session_factory()


class _StopPolling(Exception):
    pass


def test_poll_survives_a_database_outage(users, db, session_factory, local_settings):
    schedule_stats_update(db, ["alice"], settings=local_settings)
    db.commit()

    restarting = _RestartingDatabase(session_factory)
    worker = TaskWorker(restarting, build_task_registry(), settings=local_settings)

    assert worker.poll() is False
    assert restarting.failures == 1
    assert worker.poll() is True
    worker.run_until_empty()

    assert _stats_ids(session_factory) == ["alice"]


def test_run_forever_sleeps_through_a_database_outage(session_factory, local_settings, monkeypatch):
    sleeps = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        raise _StopPolling

    monkeypatch.setattr(task_worker_module.time, "sleep", fake_sleep)
    worker = TaskWorker(_RestartingDatabase(session_factory), build_task_registry(), settings=local_settings)

    with pytest.raises(_StopPolling):
        worker.run_forever()

    assert sleeps == [local_settings.task_poll_interval_seconds]
