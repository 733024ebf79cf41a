from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    # naive UTC, matching DateTime columns without timezone
    return datetime.now(timezone.utc).replace(tzinfo=None)
