from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.services.user_stats import scrub_identity

class RatingSnapshot(BaseModel):
    rating: float
    deviation: float
    volatility: float
    created_at: datetime | None = None

class IdentitySnapshot(BaseModel):
    # private fields such as email are not part of the public shape
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None
    locale: str | None = None

class IdentitySnapshotWrite(IdentitySnapshot):
    # stored alongside the public fields, scrubbed again on every read
    model_config = ConfigDict(extra="forbid")

    email: str | None = None

class UserStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    started_games: int = 0
    finished_games: int = 0
    solo_wins: int = 0
    forced_draw_count: int = 0
    eliminated_count: int = 0
    dropped_count: int = 0
    missed_turn_phases: int = 0
    active_turn_phases: int = 0
    ready_turn_phases: int = 0
    reliability: float = 0.0
    quickness: float = 0.0
    owned_ban_count: int = 0
    shared_ban_count: int = 0
    hater_score: float = 0.0
    hated_score: float = 0.0
    rating: RatingSnapshot | None = None
    identity_snapshot: IdentitySnapshot | None = None
    updated_at: datetime | None = None

    @field_validator("identity_snapshot", mode="before")
    @classmethod
    def _scrub_identity(cls, value):
        if isinstance(value, dict):
            return scrub_identity(value)
        return value

class UserStatsWrite(BaseModel):
    started_games: int = Field(0, ge=0)
    finished_games: int = Field(0, ge=0)
    solo_wins: int = Field(0, ge=0)
    forced_draw_count: int = Field(0, ge=0)
    eliminated_count: int = Field(0, ge=0)
    dropped_count: int = Field(0, ge=0)
    missed_turn_phases: int = Field(0, ge=0)
    active_turn_phases: int = Field(0, ge=0)
    ready_turn_phases: int = Field(0, ge=0)
    reliability: float = 0.0
    quickness: float = 0.0
    owned_ban_count: int = Field(0, ge=0)
    shared_ban_count: int = Field(0, ge=0)
    hater_score: float = 0.0
    hated_score: float = 0.0
    rating: RatingSnapshot | None = None
    identity_snapshot: IdentitySnapshotWrite | None = None

class UserStatsPage(BaseModel):
    items: list[UserStatsRead]
    next_cursor: str | None = None

class StatsRefreshRequest(BaseModel):
    user_ids: list[Annotated[str, Field(min_length=1)]]

class StatsRefreshResponse(BaseModel):
    queued: int
