import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "test")

import pytest
from sqlalchemy.orm import sessionmaker

from app.config.settings import Settings
from app.db.base import Base
from app.db.session import build_engine

# Import models so SQLAlchemy metadata includes all mapped tables.
from app.db.models import ban, game, game_result, glicko_rating, phase_result, scheduled_task, user, user_stats  # noqa: F401


@pytest.fixture
def engine(tmp_path):
    # a file database so the worker's sessions get their own connections
    engine = build_engine(f"sqlite:///{tmp_path / 'stats.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def local_settings():
    return Settings(
        DATABASE_URL="sqlite://",
        APP_ENV="test",
        TASK_MAX_ATTEMPTS=3,
        TASK_RETRY_BASE_SECONDS=5,
        TASK_LEASE_SECONDS=60,
    )


@pytest.fixture
def production_settings():
    return Settings(DATABASE_URL="sqlite://", APP_ENV="production")
