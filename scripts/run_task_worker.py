import argparse

from app.config.settings import get_settings
from app.db.session import SessionLocal
from app.logging_config import setup_logging
from app.services.task_registry import build_task_registry
from app.services.task_worker import TaskWorker


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run deferred tasks from the scheduled_tasks outbox."
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Drain the tasks that are due now and exit instead of polling forever.",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds to sleep between polls when no task is due.",
    )
    args = parser.parse_args()

    settings = get_settings()
    if args.poll_interval is not None:
        settings = settings.model_copy(update={"task_poll_interval_seconds": args.poll_interval})
    setup_logging(settings.log_level)

    worker = TaskWorker(SessionLocal, build_task_registry(), settings=settings)
    if args.once:
        processed = worker.run_until_empty()
        print(f"Processed {processed} task(s).")
        return

    worker.run_forever()


if __name__ == "__main__":
    main()
