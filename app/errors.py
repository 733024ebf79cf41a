"""Exceptions raised by the stats pipeline.

Database failures inside counted queries, reads and writes are not wrapped;
they surface as SQLAlchemy exceptions so the task worker retries them like any
other failure.
"""


class StatsError(Exception):
    """Base class for errors raised by this service."""


class SchedulingError(StatsError):
    """The task outbox rejected an enqueue."""


class UserNotFoundError(StatsError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id!r} not found")
        self.user_id = user_id


class UnknownTaskTypeError(StatsError):
    def __init__(self, task_type):
        super().__init__(f"No handler registered for task type {task_type!r}")
        self.task_type = task_type


class LeaseLostError(StatsError):
    """Another worker took over the task while it was running."""
