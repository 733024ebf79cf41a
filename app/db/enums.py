import enum

class Environment(enum.StrEnum):
    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"

class GameOutcome(enum.StrEnum):
    SOLO_WINNER = "solo_winner"
    FORCED_DRAW = "forced_draw"
    ELIMINATED = "eliminated"
    DROPPED = "dropped"

class PhaseStatus(enum.StrEnum):
    MISSED = "missed"
    ACTIVE = "active"
    READY = "ready"

class TaskType(enum.StrEnum):
    UPDATE_USER_STATS = "stats.update_user_stats"
    UPDATE_USER_STAT = "stats.update_user_stat"

class TaskStatus(enum.StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    FAILED = "failed"
