import argparse

from sqlalchemy import select

from app.config.settings import get_settings
from app.db.models.user import User
from app.db.session import SessionLocal
from app.logging_config import setup_logging
from app.services.user_stats import schedule_stats_update


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Schedule a stats recalculation for the given users."
    )
    parser.add_argument("user_ids", nargs="*", help="User ids to refresh.")
    parser.add_argument(
        "--all",
        action="store_true",
        help="Refresh every known user.",
    )
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level)

    with SessionLocal() as db:
        user_ids = list(args.user_ids)
        if args.all:
            user_ids.extend(db.execute(select(User.id).order_by(User.id)).scalars().all())

        if not user_ids:
            print("No users given. Nothing scheduled.")
            return

        schedule_stats_update(db, user_ids, settings=settings)
        db.commit()

    print(f"Scheduled stats refresh for {len(user_ids)} user(s).")


if __name__ == "__main__":
    main()
